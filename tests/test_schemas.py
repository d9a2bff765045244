from loi_service.schemas import LetterRequest, ZipRequest


def test_letter_request_coerces_unusable_values_to_none():
    req = LetterRequest.from_payload({
        "price": "not a number",
        "financing": True,
        "earnest1": {"amount": 1},
        "buyerEntity": "   ",
        "owner": ["x"],
        "address": 42,
        "unknown": "ignored",
    })
    assert req.price is None
    assert req.financing is None
    assert req.earnest1 is None
    assert req.buyerEntity is None
    assert req.owner is None
    assert req.address_text is None


def test_letter_request_accepts_numeric_strings():
    req = LetterRequest.from_payload({"price": "$1,250,000", "earnest2": "5000.75"})
    assert req.price == 1250000.0
    assert req.earnest2 == 5000.75


def test_letter_request_address_shapes():
    assert LetterRequest.from_payload({"address": "9 Oak Ave"}).address_text == "9 Oak Ave"
    assert LetterRequest.from_payload({"address": {"full": "9 Oak Ave", "zip": "1"}}).address_text == "9 Oak Ave"
    assert LetterRequest.from_payload({"address": {"street": "9 Oak Ave"}}).address_text is None


def test_letter_request_from_non_object_is_empty():
    assert LetterRequest.from_payload(None) == LetterRequest()
    assert LetterRequest.from_payload(["price", 1]) == LetterRequest()
    assert LetterRequest.from_payload("hello") == LetterRequest()


def test_zip_request_entries_only_for_lists():
    assert ZipRequest(pdfs=[{"data": "AA=="}]).entries() == [{"data": "AA=="}]
    assert ZipRequest(pdfs="not-an-array").entries() is None
    assert ZipRequest().entries() is None


def test_letter_request_numbers_too_large_for_float_fall_back():
    huge = int("9" * 400)
    req = LetterRequest.from_payload({"price": huge, "financing": "9" * 400, "earnest1": 1e308 * 10})
    assert req.price is None
    assert req.financing is None
    assert req.earnest1 is None


def test_zip_entry_non_string_filename_is_dropped():
    from loi_service.schemas import ZipEntry

    assert ZipEntry.model_validate({"data": "AA==", "filename": 123}).filename is None
    assert ZipEntry.model_validate({"data": "AA==", "filename": "a.pdf"}).filename == "a.pdf"
