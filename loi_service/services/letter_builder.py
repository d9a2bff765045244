"""
Letter of Intent template.

Maps a `LetterRequest` onto the fixed LOI layout. The legal text is constant;
only the header fields, the money amounts in the terms, the acceptance date
and the party names are substituted. Missing values always fall back to
default text, so building a letter cannot fail.
"""

from __future__ import annotations

from datetime import date
from typing import List, Optional, Sequence, Tuple

from loi_service.documents import (
    SPACER,
    Align,
    Indent,
    LetterDocument,
    Paragraph,
    Run,
    RunStyle,
    Section,
    bold,
    para,
    plain,
)
from loi_service.schemas import LetterRequest


LETTER_TITLE = "Letter of Intent"
DEFAULT_PURCHASER = "REK Partners or 1057-9 E 15th LLC & 514 Olpp Ave LLC"
DEFAULT_AUTHOR = "REK Partners"
DEFAULT_OWNER = "Property Owner"
TBD = "TBD"

SECTION_NAMES = ("title", "metadata", "intro", "terms", "closing", "signature")

TERM_LABELS = (
    "Price",
    "Financing",
    "Earnest Money",
    "Due Diligence",
    "Title Contingency",
    "Appraisal Contingency",
    "Buyer Contingency",
    "Closing",
    "Closing Costs",
    "Purchase Contract",
)

SIGNATURE_LINE = "By: _____________________________________ Date:________________"
NAME_LINE = "Name: ___________________________________"
TITLE_LINE = "Title: ____________________________________"


def format_amount(value: Optional[float]) -> str:
    """
    en-US grouping with at most three fraction digits.

    1234567 -> "1,234,567", 1234.5 -> "1,234.5", None -> "TBD".
    """
    if value is None:
        return TBD
    rounded = round(value, 3)
    if rounded == int(rounded):
        return f"{int(rounded):,}"
    return f"{rounded:,.3f}".rstrip("0").rstrip(".")


def money(value: Optional[float]) -> str:
    return f"${format_amount(value)}"


def format_today(d: date) -> str:
    return f"{d.month}/{d.day}/{d.year}"


def _term(label: str, body: str, subs: Sequence[str] = ()) -> List[Paragraph]:
    out = [para(bold(f"{label}: "), plain(body))]
    out.extend(para(plain(s), indent=Indent.SUB_TERM) for s in subs)
    return out


def _terms(req: LetterRequest) -> List[Tuple[str, str, Tuple[str, ...]]]:
    return [
        ("Price", money(req.price), ()),
        (
            "Financing",
            f"Purchaser intends to obtain a loan of roughly {money(req.financing)} commercial financing "
            "priced at prevailing interest rates.",
            (),
        ),
        (
            "Earnest Money",
            "Concurrently with full execution of a Purchase & Sale Agreement, Purchaser shall make an earnest "
            'money deposit ("The Initial Deposit") with a mutually agreed upon escrow agent in the amount of '
            f"USD {money(req.earnest1)} to be held in escrow and applied to the purchase price at closing. "
            f"On expiration of the Due Diligence, Purchaser will pay a further {money(req.earnest2)} deposit "
            f"towards the purchase price and the combined {money(req.totalEarnest)} will be fully non-refundable.",
            (),
        ),
        (
            "Due Diligence",
            "Purchaser shall have 45 calendar days due diligence period from the time of the execution of a "
            "formal Purchase and Sale Agreement and receipt of relevant documents.",
            (
                "Seller to provide all books and records within 3 business day of effective contract date, "
                "including HOA resale certificates, property disclosures, 3 years of financial statements, "
                "pending litigation, and all documentation related to sewage intrusion.",
            ),
        ),
        (
            "Title Contingency",
            "Seller shall be ready, willing and able to deliver free and clear title to the Property at "
            "closing, subject to standard title exceptions acceptable to Purchaser.",
            ("Purchaser to select title and escrow companies.",),
        ),
        ("Appraisal Contingency", "None", ()),
        (
            "Buyer Contingency",
            "Purchaser's obligation to close is contingent upon Purchaser's approval, in its sole discretion, "
            "of the results of its due diligence investigation of the Property.",
            (),
        ),
        (
            "Closing",
            "Closing shall occur within 30 calendar days after the expiration of the Due Diligence period, "
            "or sooner at Purchaser's election.",
            ("Seller to deliver the Property vacant and in its present condition at closing.",),
        ),
        (
            "Closing Costs",
            "Seller shall pay for the owner's policy of title insurance and any transfer taxes. Escrow fees "
            "shall be split equally between Purchaser and Seller. All other closing costs shall be allocated "
            "according to local custom.",
            (),
        ),
        (
            "Purchase Contract",
            "Purchaser shall deliver a draft Purchase and Sale Agreement within 10 business days following "
            "the mutual execution of this letter of intent.",
            (),
        ),
    ]


def build_letter(request: Optional[LetterRequest] = None, today: Optional[date] = None) -> LetterDocument:
    """Build the complete LOI block sequence; `today` only feeds the default DATE value."""
    req = request or LetterRequest()
    today = today or date.today()

    purchaser = req.buyerEntity or DEFAULT_PURCHASER
    signer = req.buyerEntity or DEFAULT_AUTHOR
    owner = req.owner or DEFAULT_OWNER
    address = req.address_text or TBD

    title = Section("title", (
        para(Run(LETTER_TITLE, RunStyle.TITLE), align=Align.CENTER),
        SPACER,
    ))

    metadata = Section("metadata", (
        para(bold("DATE: "), plain(req.today or format_today(today))),
        para(bold("Purchaser: "), plain(purchaser)),
        para(bold("RE: "), plain(f'{address} ("the Property")')),
        SPACER,
    ))

    intro = Section("intro", (
        para(
            plain("This "),
            bold("non-binding letter"),
            plain(
                " represents Purchaser's intent to purchase the above captioned property (the \"Property\") "
                "including the land and improvements on the following terms and conditions:"
            ),
        ),
        SPACER,
    ))

    term_paragraphs: List[Paragraph] = []
    for i, (label, body, subs) in enumerate(_terms(req)):
        if i:
            term_paragraphs.append(SPACER)
        term_paragraphs.extend(_term(label, body, subs))
    terms = Section("terms", tuple(term_paragraphs))

    closing = Section("closing", (
        SPACER,
        para(
            plain("This letter of intent is "),
            bold("not intended"),
            plain(
                " to create a binding agreement on the Seller to sell or the Purchaser to buy. The purpose of "
                "this letter is to set forth the primary terms and conditions upon which to execute a formal "
                "Purchase and Sale Agreement. All other terms and conditions shall be negotiated in the formal "
                "Purchase and Sale Agreement. This letter of Intent is open for acceptance through "
            ),
            bold(req.acceptBy or TBD),
            plain("."),
        ),
    ))

    sig = Indent.SIGNATURE
    signature = Section("signature", (
        SPACER,
        SPACER,
        para(plain(f"PURCHASER: {signer}"), indent=sig),
        SPACER,
        para(plain(SIGNATURE_LINE), indent=sig),
        para(plain(NAME_LINE), indent=sig),
        SPACER,
        para(Run("AGREED AND ACCEPTED:", RunStyle.ACCEPTANCE), indent=sig),
        SPACER,
        para(plain(f"SELLER: {owner}"), indent=sig),
        SPACER,
        para(plain(SIGNATURE_LINE), indent=sig),
        para(plain(NAME_LINE), indent=sig),
        para(plain(TITLE_LINE), indent=sig),
    ))

    return LetterDocument(
        title=LETTER_TITLE,
        author=signer,
        sections=(title, metadata, intro, terms, closing, signature),
    )
