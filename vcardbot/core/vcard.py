from dataclasses import dataclass

import vobject
from vobject.vcard import Name

CONTENT_TYPE = "text/vcard"


@dataclass
class VcardDocument:
    filename: str
    data: bytes
    numbers: list


def group(numbers, size=5):
    """Consecutive groups of `size`; the last may be shorter."""
    return [numbers[i:i + size] for i in range(0, len(numbers), size)]


def render_card(name, number):
    card = vobject.vCard()
    card.add("n").value = Name(given=name)
    card.add("fn").value = name
    tel = card.add("tel")
    tel.value = number
    tel.type_param = "CELL"
    return card.serialize()


def build_documents(numbers, label, size=5):
    """One .vcf per group, cards named LABEL-1..k within each file."""
    documents = []
    for i, chunk in enumerate(group(numbers, size), start=1):
        text = "".join(
            render_card(f"{label}-{x}", n) for x, n in enumerate(chunk, start=1)
        )
        documents.append(VcardDocument(
            filename=f"{label}_{i}.vcf",
            data=text.encode("utf-8"),
            numbers=chunk,
        ))
    return documents
