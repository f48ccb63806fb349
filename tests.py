import copy
import json
import logging

import pytest

from contacts_resolver.core.contact import Contact, Address
from contacts_resolver.core.diff import contact_differences, describe_contact, group_by_name
from contacts_resolver.core.importer import ContactImporter
from contacts_resolver.core.index import DedupIndex
from contacts_resolver.core.matcher import ContactMatcher, compare_contacts
from contacts_resolver.core.merger import ContactMerger
from contacts_resolver.core.types import ImportAction, MatchStrength, ValidationLevel
from contacts_resolver.io.csv import CSVHandler
from contacts_resolver.io.properties import (
    build_operations,
    contact_from_properties,
    contact_to_properties,
    parse_birthday,
)
from contacts_resolver.io.vcard import VCardHandler
from contacts_resolver.processors.email import normalize_email
from contacts_resolver.processors.name import normalize_name
from contacts_resolver.processors.phone import normalize_phone, PhoneProcessor
from contacts_resolver.utils.validation import validate_contact

import main

logger = logging.getLogger(__name__)

SAMPLE_VCARD = """BEGIN:VCARD
VERSION:3.0
FN:John Doe
N:Doe;John;Quincy;Dr.;Jr.
EMAIL;TYPE=INTERNET:john@example.com
EMAIL;TYPE=INTERNET:mailto:jd@work.example.com
TEL;TYPE=CELL:+1-555-123-4567
ADR;TYPE=HOME:;;123 Main St;Springfield;IL;62701;USA
ORG:Acme Corp
TITLE:Engineer
URL:https://example.com
NOTE:Met at conference
BDAY:1980-01-15
UID:obj-1
END:VCARD
BEGIN:VCARD
VERSION:3.0
FN:Johnny Doe
N:Doe;Johnny;;;
TEL:555-123-4567
END:VCARD
BEGIN:VCARD
VERSION:3.0
FN:Jane Smith
N:Smith;Jane;;;
TEL:+44 20 7123 4567
END:VCARD
"""


def run_batch(contacts):
    """Import contacts one at a time, returning the ones that were new"""
    index = DedupIndex()
    imported = []
    for contact in contacts:
        if not index.is_duplicate(contact):
            imported.append(contact)
            index.insert(contact)
    return imported


# --- Phone Normalization ---
@pytest.mark.parametrize(
    "phone",
    [
        "+1-555-123-4567",
        "1-555-123-4567",
        "555-123-4567",
        "(555) 123-4567",
        "555.123.4567",
        "5551234567",
        "+1 555 123 4567",
    ],
)
def test_phone_formats_share_key(phone):
    assert normalize_phone(phone) == "551234567"


@pytest.mark.parametrize(
    "phone, expected",
    [
        ("1234", ""),
        ("", ""),
        ("123456", "123456"),
        ("12-34-567", "1234567"),
        ("12345678", "12345678"),
        ("555-OLD-NUMB", ""),
        ("tel: 555 12 34 ext", "5551234"),
        ("+44 20 7123 4567", "071234567"),
        ("020 7123 4567", "071234567"),
    ],
)
def test_normalize_phone(phone, expected):
    assert normalize_phone(phone) == expected


def test_phone_processor_ignores_unusable_keys():
    processor = PhoneProcessor()
    assert processor.phone_keys(["123", "555-123-4567", "+1 555 123 4567"]) == ["551234567"]
    assert not processor.are_phones_matching("", "")
    assert not processor.any_phones_match(["12"], ["12"])
    assert processor.any_phones_match(["(555) 123-4567"], ["999-999-9999", "5551234567"])


# --- Email Normalization ---
@pytest.mark.parametrize(
    "email, expected",
    [
        ("J.O.H.N+x@GMAIL.com", "john@gmail.com"),
        ("john@googlemail.com", "john@gmail.com"),
        ("  John.Doe+news@Example.COM ", "john.doe@example.com"),
        ("j.doe@example.com", "j.doe@example.com"),
        ("notanemail", "notanemail"),
        ("a@b@example.com", "a@b@example.com"),
        ("+test@x.com", "@x.com"),
        ("", ""),
    ],
)
def test_normalize_email(email, expected):
    assert normalize_email(email) == expected


def test_non_gmail_dots_are_significant():
    assert normalize_email("j.doe@example.com") != normalize_email("jdoe@example.com")


# --- Name Normalization ---
@pytest.mark.parametrize(
    "name, expected",
    [
        ("John Doe", "john doe"),
        ("JOHN DOE", "john doe"),
        ("  John   Doe  ", "john doe"),
        ("John\tDoe", "john doe"),
        ("John\nDoe", "john doe"),
        ("Dr. John Doe", "john doe"),
        ("Dr John Doe", "john doe"),
        ("Mrs. Jane Doe", "jane doe"),
        ("Prof. John Doe", "john doe"),
        ("Professor John Doe", "professor john doe"),
        ("John Doe Jr.", "john doe"),
        ("John Doe III", "john doe"),
        ("John Doe MD", "john doe"),
        ("Dr. José García PhD", "jose garcia"),
        ("Mr. John Doe Jr.", "john doe"),
        ("Müller", "muller"),
        ("Dvořák", "dvorak"),
        ("Søren", "søren"),
        ("Ñoño Müller-García", "nono muller-garcia"),
        ("O'Connor", "o'connor"),
        ("Dr.", "dr."),
        ("   ", ""),
        ("", ""),
    ],
)
def test_normalize_name(name, expected):
    assert normalize_name(name) == expected


def test_only_one_prefix_is_stripped():
    assert normalize_name("Dr. Mr. John Doe") == "mr. john doe"


# --- Duplicate Index ---
def test_index_duplicate_by_phone():
    index = DedupIndex([Contact(full_name="John Doe", phones=["+1-555-123-4567"])])
    assert index.is_duplicate(Contact(full_name="Johnny Doe", phones=["555-123-4567"]))


@pytest.mark.parametrize(
    "email",
    ["JOHN.DOE@gmail.com", "john.doe+work@gmail.com", "johndoe@googlemail.com"],
)
def test_index_duplicate_by_email(email):
    index = DedupIndex([Contact(full_name="John Doe", emails=["johndoe@gmail.com"])])
    assert index.is_duplicate(Contact(full_name="Someone Else", emails=[email]))


def test_index_name_match_between_minimal_contacts():
    index = DedupIndex([Contact(full_name="John Doe", phones=["111-111-1111"])])
    assert index.is_duplicate(Contact(full_name="John Doe", phones=["222-222-2222"]))


def test_index_name_match_rejected_for_detailed_contacts():
    existing = Contact(
        full_name="John Doe",
        phones=["111-111-1111", "222-222-2221", "333-333-3331", "444-444-4441"],
    )
    index = DedupIndex([existing])

    with_address = Contact(
        full_name="John Doe",
        phones=["555-555-5555"],
        addresses=[Address(street="1 Main St", city="Springfield")],
    )
    assert not index.is_duplicate(with_address)

    with_email = Contact(full_name="John Doe", emails=["other.john@example.com"])
    assert not index.is_duplicate(with_email)


def test_index_name_match_with_overlap():
    existing = Contact(
        full_name="John Doe", phones=["555-123-4567"], emails=["john@example.com"]
    )
    index = DedupIndex([existing])
    query = Contact(
        full_name="Dr. John Doe",
        phones=["555-999-9999", "+1 555 123 4567"],
        emails=["jd@example.com"],
    )
    assert index.find_candidates(query) == [existing]


def test_index_unnamed_contacts_never_match_by_name():
    index = DedupIndex([Contact(), Contact(phones=["12"])])
    assert not index.is_duplicate(Contact())
    assert not index.is_duplicate(Contact(full_name=""))


def test_index_organization_used_as_name():
    index = DedupIndex([Contact(organization="Acme Corp")])
    assert index.is_duplicate(Contact(organization="ACME  corp"))


def test_index_excludes_query_and_counts_each_candidate_once():
    contact = Contact(
        full_name="John Doe", phones=["555-123-4567"], emails=["john@example.com"]
    )
    index = DedupIndex([contact])
    assert index.find_candidates(contact) == []

    query = Contact(
        full_name="John Doe", phones=["5551234567"], emails=["JOHN@example.com"]
    )
    assert index.find_candidates(query) == [contact]


def test_index_shared_bucket_returns_every_owner():
    support = Contact(full_name="Support", phones=["1-800-555-1234"], organization="Acme")
    sales = Contact(full_name="Sales", phones=["800-555-1234"], organization="Acme")
    index = DedupIndex([support, sales])

    candidates = index.find_candidates(Contact(full_name="Front Desk", phones=["+1 800 555 1234"]))
    assert candidates == [support, sales]
    assert len(index) == 2


def test_index_reinsert_does_not_duplicate_contacts():
    contact = Contact(full_name="John Doe", phones=["555-123-4567"])
    index = DedupIndex([contact])
    index.insert(contact)
    assert len(index) == 1
    assert index.contacts == [contact]
    assert index.find_candidates(Contact(phones=["555-123-4567"])) == [contact]


def test_index_family_members_stay_apart():
    index = DedupIndex(
        [Contact(full_name="John Smith", phones=["555-111-1111"], emails=["john@smith.com"])]
    )
    wife = Contact(full_name="Jane Smith", phones=["555-222-2222"], emails=["jane@smith.com"])
    son = Contact(full_name="John Smith Jr.", phones=["555-333-3333"], emails=["junior@smith.com"])
    assert not index.is_duplicate(wife)
    assert not index.is_duplicate(son)


def test_index_international_contacts():
    index = DedupIndex(
        [
            Contact(full_name="José García", phones=["+34 612 345 678"]),
            Contact(full_name="Hans Müller", phones=["+49 30 12345678"]),
            Contact(full_name="Tanaka Yuki", phones=["+81 3 1234 5678"]),
        ]
    )
    assert index.is_duplicate(Contact(full_name="Jose Garcia", phones=["612 345 678"]))
    assert index.is_duplicate(Contact(full_name="Hans Mueller", phones=["030-12345678"]))
    assert index.is_duplicate(Contact(full_name="Yuki Tanaka", phones=["03-1234-5678"]))


def test_batch_import_end_to_end():
    logger.info("TEST SUITE: BATCH IMPORT")
    contacts = [
        Contact(full_name="John Doe", phones=["+1-555-111-1111"], emails=["john@example.com"]),
        Contact(full_name="Johnny Doe", phones=["555-111-1111"]),
        Contact(full_name="J. Doe", emails=["john+work@example.com"]),
        Contact(full_name="Dr. John Doe", phones=["555-111-1111"]),
        Contact(full_name="Jane Smith", phones=["+44 20 7123 4567"]),
        Contact(full_name="Jane Smith", phones=["020 7123 4567"]),
        Contact(full_name="Bob Johnson", phones=["555-333-3333"]),
    ]

    imported = run_batch(contacts)
    assert [c.full_name for c in imported] == ["John Doe", "Jane Smith", "Bob Johnson"]


def test_batch_import_keeps_detailed_namesake():
    contacts = [
        Contact(full_name="John Doe", phones=["+1-555-111-1111"], emails=["john@example.com"]),
        Contact(full_name="Johnny Doe", phones=["555-111-1111"]),
        Contact(full_name="J. Doe", emails=["john+work@example.com"]),
        Contact(full_name="Dr. John Doe", phones=["555-111-1111"], emails=["john@other.com"]),
        Contact(full_name="Jane Smith", phones=["+44 20 7123 4567"], emails=["jane@gmail.com"]),
        Contact(full_name="Jane Smith", phones=["020 7123 4567"]),
        Contact(full_name="J Smith", emails=["j.a.n.e@gmail.com"]),
        Contact(full_name="Bob Johnson", phones=["555-333-3333"], emails=["bob@example.com"]),
        Contact(full_name="John Doe", phones=["555-999-9999"], emails=["different.john@other.com"]),
    ]

    imported = run_batch(contacts)
    assert len(imported) == 4
    assert imported[-1].emails == ["different.john@other.com"]


# --- Duplicate Classifier and Match Strength ---
def test_matcher_minimal_contact():
    matcher = ContactMatcher()
    assert matcher.is_minimal(Contact(full_name="A", phones=["1", "2", "3"]))
    assert not matcher.is_minimal(Contact(full_name="A", phones=["1", "2", "3", "4"]))
    assert not matcher.is_minimal(Contact(full_name="A", emails=["a@example.com"]))
    assert not matcher.is_minimal(Contact(full_name="A", addresses=[Address(city="Paris")]))


def test_matcher_pairwise_duplicate_rules():
    matcher = ContactMatcher()
    assert matcher.is_duplicate(
        Contact(full_name="A", phones=["555-123-4567"]),
        Contact(full_name="B", phones=["+1 555 123 4567"]),
    )
    assert matcher.is_duplicate(Contact(full_name="John Doe"), Contact(full_name="john doe"))
    assert not matcher.is_duplicate(
        Contact(full_name="John Doe", emails=["a@example.com"]),
        Contact(full_name="John Doe", emails=["b@example.com"]),
    )
    assert not matcher.is_duplicate(Contact(), Contact())


@pytest.mark.parametrize(
    "a, b, expected",
    [
        (
            Contact(full_name="A", phones=["555-123-4567"]),
            Contact(full_name="B", phones=["(555) 123-4567"]),
            MatchStrength.STRONG,
        ),
        (
            Contact(full_name="A", emails=["a.b@gmail.com"]),
            Contact(full_name="B", emails=["ab+x@googlemail.com"]),
            MatchStrength.STRONG,
        ),
        (
            Contact(full_name="John Doe", organization="Acme"),
            Contact(full_name="Dr. John Doe", organization="Acme"),
            MatchStrength.MEDIUM,
        ),
        (
            Contact(full_name="John Doe", birthday="1980-01-15"),
            Contact(full_name="john doe", birthday="1980-01-15"),
            MatchStrength.MEDIUM,
        ),
        (
            Contact(full_name="John Doe", organization="Acme", birthday="1980-01-15"),
            Contact(full_name="John Doe", organization="Acme", birthday="1980-01-15"),
            MatchStrength.MEDIUM,
        ),
        (
            Contact(full_name="John Doe", organization="Acme"),
            Contact(full_name="John Doe", organization="Globex"),
            MatchStrength.WEAK,
        ),
        (
            Contact(full_name="John Doe"),
            Contact(full_name="Jane Doe"),
            MatchStrength.NONE,
        ),
        (
            Contact(birthday="1980-01-15"),
            Contact(birthday="1980-01-15"),
            MatchStrength.NONE,
        ),
        (
            Contact(full_name="John Doe", phones=["555-123-4567"]),
            Contact(full_name="Jane Roe", phones=["+1 555 123 4567"]),
            MatchStrength.STRONG,
        ),
    ],
)
def test_compare_contacts(a, b, expected):
    assert compare_contacts(a, b) == expected


def test_match_strength_ordering():
    assert MatchStrength.STRONG > MatchStrength.MEDIUM > MatchStrength.WEAK > MatchStrength.NONE


# --- Field Merge ---
def test_merge_fills_gaps_and_appends_new_values():
    dst = Contact(
        full_name="John Doe",
        emails=["john@gmail.com"],
        phones=["555-123-4567"],
        note="old",
    )
    src = Contact(
        full_name="Johnny",
        first_name="John",
        organization="Acme",
        emails=["J.O.H.N@gmail.com", "jd@work.com"],
        phones=["+1 555 123 4567", "555-999-0000"],
        urls=["https://example.com"],
        note="new",
    )
    src_before = copy.deepcopy(src.to_dict())

    assert ContactMerger().merge(dst, src)

    assert dst.full_name == "John Doe"
    assert dst.first_name == "John"
    assert dst.organization == "Acme"
    assert dst.emails == ["john@gmail.com", "jd@work.com"]
    assert dst.phones == ["555-123-4567", "555-999-0000"]
    assert dst.urls == ["https://example.com"]
    assert dst.note == "old\n\n--- merged ---\n\nnew"
    assert src.to_dict() == src_before


def test_merge_addresses_and_urls_by_key():
    dst = Contact(
        full_name="A",
        addresses=[Address(street="1 Main St", city="Springfield")],
        urls=["https://Example.com/"],
    )
    oak = Address(street="2 Oak Ave", city="Springfield")
    src = Contact(
        addresses=[Address(street=" 1  main st ", city="SPRINGFIELD"), oak],
        urls=["https://example.com/ "],
    )

    assert ContactMerger().merge(dst, src)
    assert dst.addresses[1] is oak
    assert len(dst.addresses) == 2
    assert dst.urls == ["https://Example.com/"]


def test_merge_deduplicates_within_source():
    dst = Contact(full_name="A")
    assert ContactMerger().merge(dst, Contact(emails=["a@x.com", "A@X.com "]))
    assert dst.emails == ["a@x.com"]


@pytest.mark.parametrize(
    "dst_note, src_note, expected, changed",
    [
        ("same", "same", "same", False),
        ("kept", "", "kept", False),
        ("", "incoming", "incoming", True),
    ],
)
def test_merge_notes(dst_note, src_note, expected, changed):
    dst = Contact(full_name="A", note=dst_note)
    assert ContactMerger().merge(dst, Contact(full_name="A", note=src_note)) is changed
    assert dst.note == expected


def test_merge_into_copy_of_itself_changes_nothing():
    contact = Contact(
        full_name="John Doe",
        first_name="John",
        last_name="Doe",
        emails=["john@example.com", "jd@example.com"],
        phones=["555-123-4567", "1234"],
        addresses=[Address("1 Main St", "Springfield", "IL", "62701", "USA")],
        organization="Acme",
        urls=["https://example.com"],
        note="hello",
        birthday="1980-01-15",
    )
    before = copy.deepcopy(contact.to_dict())

    assert not ContactMerger().merge(contact, copy.deepcopy(contact))
    assert contact.to_dict() == before


def test_merge_is_one_way_enrichment():
    dst = Contact(full_name="John Doe", title="CTO", phones=["555-123-4567"], emails=["a@x.com"])
    src = Contact(
        full_name="Johnny",
        title="Engineer",
        phones=["555-000-1111"],
        emails=["b@x.com"],
        object_id="obj-src",
    )

    ContactMerger().merge(dst, src)
    assert dst.full_name == "John Doe"
    assert dst.title == "CTO"
    assert dst.phones[0] == "555-123-4567"
    assert dst.emails[0] == "a@x.com"
    assert dst.object_id == ""


def test_merge_keeps_distinct_unkeyed_phones():
    dst = Contact(full_name="A", phones=["555-123-4567"])
    src = Contact(full_name="A", phones=["ext 12", "ext 34", " ext 12 "])

    assert ContactMerger().merge(dst, src)
    assert dst.phones == ["555-123-4567", "ext 12", "ext 34"]


# --- Import Session ---
def test_importer_end_to_end():
    contacts = [
        Contact(full_name="John Doe", phones=["+1-555-111-1111"], emails=["john@example.com"]),
        Contact(full_name="Johnny Doe", phones=["555-111-1111"]),
        Contact(full_name="J. Doe", emails=["john+work@example.com"]),
        Contact(full_name="Dr. John Doe", phones=["555-111-1111"]),
        Contact(full_name="Jane Smith", phones=["+44 20 7123 4567"]),
        Contact(full_name="Jane Smith", phones=["020 7123 4567"]),
        Contact(full_name="Bob Johnson", phones=["555-333-3333"]),
    ]

    report = ContactImporter().import_contacts(contacts)

    assert [c.full_name for c in report.entities] == ["John Doe", "Jane Smith", "Bob Johnson"]
    assert len(report.created) == 3
    assert len(report.skipped) == 4
    assert report.merged == []


def test_importer_merges_and_learns_new_keys():
    existing = Contact(
        full_name="Ann Lee",
        phones=["555-100-2000"],
        emails=["ann@example.com"],
        object_id="obj-ann",
    )
    importer = ContactImporter(existing=[existing])

    outcome = importer.import_contact(
        Contact(full_name="Ann Lee", phones=["555-100-2000"], emails=["ann.lee@work.com"])
    )
    assert outcome.action == ImportAction.MERGED
    assert outcome.target is existing
    assert outcome.changed
    assert existing.emails == ["ann@example.com", "ann.lee@work.com"]

    outcome = importer.import_contact(Contact(full_name="A. Lee", emails=["ANN.LEE@work.com"]))
    assert outcome.action == ImportAction.SKIPPED
    assert outcome.target is existing
    assert len(importer.index) == 1



def test_importer_reindexes_only_new_keys():
    existing = Contact(full_name="Ann Lee", phones=["555-111-1111"])
    importer = ContactImporter(existing=[existing])

    for i in range(5):
        outcome = importer.import_contact(
            Contact(full_name="Ann Lee", phones=["555-111-1111"], emails=[f"ann{i}@example.com"])
        )
        assert outcome.action == ImportAction.MERGED

    assert importer.index.by_phone["551111111"] == [existing]
    assert importer.index.by_name["ann lee"] == [existing]
    assert importer.index.by_email["ann4@example.com"] == [existing]


def test_importer_without_merge_skips_duplicates():
    existing = Contact(full_name="Ann Lee", phones=["555-100-2000"])
    importer = ContactImporter(existing=[existing], merge=False)

    outcome = importer.import_contact(
        Contact(full_name="Ann Lee", phones=["555-100-2000"], organization="Acme")
    )
    assert outcome.action == ImportAction.SKIPPED
    assert existing.organization == ""


def test_importer_reimport_is_all_skipped():
    first = [
        Contact(full_name="John Doe", phones=["555-123-4567"]),
        Contact(full_name="Jane Roe", emails=["jane@example.com"]),
    ]
    importer = ContactImporter(existing=first)
    report = importer.import_contacts(copy.deepcopy(first))

    assert len(report.skipped) == 2
    assert report.created == []
    assert len(report.entities) == 2


def test_importer_strict_validation_rejects_contact():
    importer = ContactImporter(validation_level=ValidationLevel.STRICT)
    outcome = importer.import_contact(Contact(full_name="Bad", emails=["notanemail"]))

    assert outcome.action == ImportAction.INVALID
    assert len(importer.index) == 0


def test_build_operations_for_import():
    existing = Contact(full_name="Ann Lee", phones=["555-100-2000"], object_id="obj-ann")
    importer = ContactImporter(existing=[existing])
    report = importer.import_contacts(
        [
            Contact(full_name="Ann Lee", phones=["555-100-2000"], title="CTO"),
            Contact(full_name="Bob Roe", emails=["bob@example.com"]),
        ]
    )

    operations = build_operations(report)
    assert [op["action"] for op in operations] == ["create", "update"]
    assert operations[0]["name"] == "Bob Roe"
    assert operations[1]["object_id"] == "obj-ann"
    assert {"key": "title", "text": "CTO"} in operations[1]["properties"]


# --- Validation ---
def test_validate_contact_levels():
    contact = Contact(emails=["notanemail"], phones=["1234", "555-123-4567"])

    basic = validate_contact(contact, ValidationLevel.BASIC)
    assert basic["errors"] == []
    assert "Contact has no name or organization" in basic["warnings"]
    assert "Invalid email format: notanemail" in basic["warnings"]
    assert "Phone too short to match: 1234" in basic["warnings"]

    strict = validate_contact(contact, ValidationLevel.STRICT)
    assert "Invalid email format: notanemail" in strict["errors"]
    assert "Phone too short to match: 1234" in strict["errors"]

    assert validate_contact(contact, ValidationLevel.NONE) == {"errors": [], "warnings": []}


# --- Diff Report ---
def test_group_by_name():
    doctor = Contact(full_name="Dr. John Doe", phones=["555-111-1111"])
    plain = Contact(full_name="john doe", phones=["555-222-2222"])
    jane = Contact(full_name="Jane Roe")

    assert group_by_name([doctor, jane, plain]) == {"john doe": [doctor, plain]}
    assert group_by_name([doctor, jane, plain], name_filter="JOHN") == {"john doe": [doctor, plain]}
    assert group_by_name([doctor, jane, plain], name_filter="roe") == {}


def test_contact_differences():
    a = Contact(full_name="John Doe", phones=["555-111-1111"], note="x" * 40)
    b = Contact(full_name="John Doe", title="CTO", phones=["555-222-2222"], addresses=[Address(city="Paris")])

    lines = contact_differences(a, b)
    assert "Title: (empty) → 'CTO'" in lines
    assert "Phones: -555-111-1111" in lines
    assert "Phones: +555-222-2222" in lines
    assert "Address: (empty) → 'Paris'" in lines
    assert f"Note: {'x' * 30 + '...'!r} → (empty)" in lines
    assert contact_differences(a, copy.deepcopy(a)) == []


def test_describe_contact():
    contact = Contact(first_name="John", last_name="Doe", phones=["555-111-1111"], birthday="1980-01-15")
    assert describe_contact(contact) == ["Name: John Doe", "Phone 1: 555-111-1111", "Birthday: 1980-01-15"]


# --- vCard and CSV ---
def test_parse_vcard_fields():
    contacts = VCardHandler().parse_vcards(SAMPLE_VCARD)
    assert len(contacts) == 3

    john = contacts[0]
    assert john.full_name == "John Doe"
    assert (john.prefix, john.first_name, john.middle_name, john.last_name, john.suffix) == (
        "Dr.",
        "John",
        "Quincy",
        "Doe",
        "Jr.",
    )
    assert john.emails == ["john@example.com", "jd@work.example.com"]
    assert john.phones == ["+1-555-123-4567"]
    assert john.organization == "Acme Corp"
    assert john.title == "Engineer"
    assert john.urls == ["https://example.com"]
    assert john.note == "Met at conference"
    assert john.birthday == "1980-01-15"
    assert john.object_id == "obj-1"
    assert john.addresses == [Address("123 Main St", "Springfield", "IL", "62701", "USA")]


def test_vcard_round_trip():
    handler = VCardHandler()
    original = handler.parse_vcards(SAMPLE_VCARD)
    parsed = handler.parse_vcards(handler.serialize(original))

    assert [c.full_name for c in parsed] == ["John Doe", "Johnny Doe", "Jane Smith"]
    assert parsed[0].emails == original[0].emails
    assert parsed[0].phones == original[0].phones
    assert parsed[0].addresses == original[0].addresses
    assert parsed[2].phones == ["+44 20 7123 4567"]


def test_csv_round_trip(tmp_path):
    contact = Contact(
        full_name="John Doe",
        first_name="John",
        last_name="Doe",
        emails=["john@example.com", "jd@example.com"],
        phones=["555-123-4567"],
        addresses=[Address("1 Main St", "Springfield", "IL", "62701", "USA")],
        organization="Acme",
        title="CTO",
        object_id="obj-1",
    )
    path = tmp_path / "contacts.csv"
    handler = CSVHandler()
    handler.write_csv([contact], str(path))

    loaded = handler.read_csv(str(path))
    assert len(loaded) == 1
    assert loaded[0].to_dict() == contact.to_dict()


def test_csv_header_aliases(tmp_path):
    path = tmp_path / "export.csv"
    path.write_text("Name,E-mail Address,Mobile,Company\nJane Roe,jane@example.com; jr@example.com,555-222-3333,Globex\n")

    loaded = CSVHandler().read_csv(str(path))
    assert loaded[0].full_name == "Jane Roe"
    assert loaded[0].emails == ["jane@example.com", "jr@example.com"]
    assert loaded[0].phones == ["555-222-3333"]
    assert loaded[0].organization == "Globex"


# --- Object Store Projection ---
def test_contact_from_properties():
    properties = [
        {"key": "name", "text": "John Doe"},
        {"key": "given_name", "text": "John"},
        {"key": "email", "email": "john@example.com"},
        {"key": "email2", "email": "jd@example.com"},
        {"key": "phone", "phone": "555-123-4567"},
        {"key": "phone3", "phone": ""},
        {"key": "city", "text": "Springfield"},
        {"key": "country", "text": "USA"},
        {"key": "birthday", "date": "1980-01-15T00:00:00Z"},
        {"key": "unknown", "text": "ignored"},
    ]
    contact = contact_from_properties("obj-1", "John Doe", properties)

    assert contact.object_id == "obj-1"
    assert contact.full_name == "John Doe"
    assert contact.emails == ["john@example.com", "jd@example.com"]
    assert contact.phones == ["555-123-4567"]
    assert contact.addresses == [Address(city="Springfield", country="USA")]
    assert contact.birthday == "1980-01-15T00:00:00Z"


def test_contact_to_properties():
    contact = Contact(
        first_name="John",
        last_name="Doe",
        emails=["a@x.com", "b@x.com", "c@x.com", "d@x.com"],
        phones=["555-123-4567"],
        urls=["https://one.example", "https://two.example"],
        note="Friend",
        birthday="19800115",
    )
    props = contact_to_properties(contact)

    assert {"key": "name", "text": "John Doe"} in props
    assert [p["email"] for p in props if "email" in p] == ["a@x.com", "b@x.com", "c@x.com"]
    assert {"key": "phone", "phone": "555-123-4567"} in props
    assert {"key": "url", "url": "https://one.example"} in props
    assert {
        "key": "notes",
        "text": "Friend\n\nAdditional emails: d@x.com\n\nAdditional URLs: https://two.example",
    } in props
    assert {"key": "birthday", "date": "1980-01-15T00:00:00Z"} in props



def test_store_round_trip_keeps_note():
    contact = Contact(
        full_name="John Doe",
        emails=["a@x.com", "b@x.com", "c@x.com", "d@x.com"],
        urls=["https://one.example", "https://two.example"],
        note="Met\n\nat the fair",
    )
    props = contact_to_properties(contact)

    stored = contact_from_properties("obj-1", "John Doe", props)
    assert stored.note == "Met\n\nat the fair"
    assert stored.emails == contact.emails
    assert stored.urls == contact.urls

    outcome = ContactImporter(existing=[stored]).import_contact(copy.deepcopy(contact))
    assert outcome.action == ImportAction.SKIPPED
    assert stored.note == "Met\n\nat the fair"
    assert contact_to_properties(stored) == props


def test_unnamed_contact_has_no_name_property():
    props = contact_to_properties(Contact(phones=["555-123-4567"]))
    assert not any(p["key"] == "name" for p in props)


@pytest.mark.parametrize(
    "birthday, expected",
    [
        ("19800115", "1980-01-15T00:00:00Z"),
        ("1980-01-15", "1980-01-15T00:00:00Z"),
        ("--0115", "--0115"),
    ],
)
def test_parse_birthday(birthday, expected):
    assert parse_birthday(birthday) == expected


# --- Command Line ---
def test_cli_import(tmp_path, capsys):
    vcf = tmp_path / "contacts.vcf"
    vcf.write_text(SAMPLE_VCARD, encoding="utf-8")
    out = tmp_path / "out"
    plan = tmp_path / "plan.json"

    assert main.main(["import", str(vcf), "-o", str(out), "--plan", str(plan)]) == 0

    written = VCardHandler().read_vcard(str(out / "contacts.vcf"))
    assert [c.full_name for c in written] == ["John Doe", "Jane Smith"]
    assert (out / "contacts.csv").exists()
    assert [op["action"] for op in json.loads(plan.read_text(encoding="utf-8"))] == ["create", "create"]
    assert "2 distinct contacts" in capsys.readouterr().out


def test_cli_import_dry_run_writes_nothing(tmp_path):
    vcf = tmp_path / "contacts.vcf"
    vcf.write_text(SAMPLE_VCARD, encoding="utf-8")
    out = tmp_path / "out"

    assert main.main(["import", str(vcf), "-o", str(out), "--dry-run"]) == 0
    assert not out.exists()


def test_cli_diff(tmp_path, capsys):
    vcf = tmp_path / "contacts.vcf"
    handler = VCardHandler()
    handler.write_vcard(
        [
            Contact(full_name="John Doe", organization="Acme", phones=["555-111-1111"]),
            Contact(full_name="Dr. John Doe", organization="Acme", phones=["555-222-2222"]),
            Contact(full_name="Jane Roe"),
        ],
        str(vcf),
    )

    assert main.main(["diff", str(vcf)]) == 0
    output = capsys.readouterr().out
    assert "=== John Doe (2 contacts) ===" in output
    assert "(match: medium)" in output
    assert "Phones: +555-222-2222" in output
