"""Every text the bot sends to a chat."""

START = """✅ Bot aktif.

Gunakan:
#{fresh} JUMLAH
#{fu} JUMLAH

Laporan:
/report
/reportdate YYYY-MM-DD
/reportmonth BULAN(1-12) TAHUN
/reset (opsional)

Contoh:
/reportdate 2026-02-22
/reportmonth 12 2025
/reportmonth 2 2026"""

QUEUED = "📥 Cek japri Bro"
CHECK_DM = "✅ Cek Japri bro..."
PROCESSING = "⏳ Sebentar Bro..."
INSUFFICIENT_STOCK = "❌ Stok tidak cukup"
DELIVERY_FAILED = "❌ Gagal kirim file. Pastikan kamu sudah /start bot."
DONE = "✅ PASTIKAN TIDAK SALAH TEMPLATE. SEMANGAT!"

REPORT_FAILED = "❌ Gagal ambil report. Pastikan sheet REPORT ada & header-nya bener."
REPORT_DATE_FAILED = "❌ Gagal ambil report tanggal."
REPORT_MONTH_FAILED = "❌ Gagal ambil report bulanan."
RESET_FAILED = "❌ Gagal reset report."
REPORT_MONTH_USAGE = """❌ Format salah. Contoh:
/reportmonth 12 2025
/reportmonth 1 2026
/reportmonth 2 2026"""


def start_text(pools):
    tags = {p.category: p.tag for p in pools.values()}
    return START.format(fresh=tags.get("fresh", "vcardfresh"), fu=tags.get("fu", "vcardfu"))


def done_text(report=None):
    if report is None:
        return DONE
    return (
        f"{DONE}\n\n📊 REPORT HARI INI ({report.date})\n"
        f"FRESH keluar: {report.fresh}\nFU keluar: {report.fu}"
    )


def today_text(report):
    return (
        f"📊 REPORT HARI INI ({report.date})\n"
        f"✅ FRESH keluar: {report.fresh}\n✅ FU keluar: {report.fu}"
    )


def date_text(date, report):
    if report is None:
        return f"📊 REPORT {date}\nData tidak ditemukan."
    return f"📊 REPORT {date}\n✅ FRESH keluar: {report.fresh}\n✅ FU keluar: {report.fu}"


def month_text(summary):
    return (
        f"📅 REPORT BULAN {summary.year}-{summary.month:02d}\n"
        f"✅ Total hari tercatat: {summary.days}\n"
        f"✅ FRESH keluar: {summary.fresh}\n✅ FU keluar: {summary.fu}"
    )


def reset_text(report):
    return f"♻️ Report hari ini di-reset ({report.date}).\nFRESH: 0\nFU: 0"
