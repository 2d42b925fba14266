"""
Tests for the field-group builders: aliases, addresses, evidences,
REL entries and PEP entries, including the policy flags.
"""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from transform.builders import (
    TransformPolicy,
    build_addresses,
    build_aliases,
    build_dates_of_birth,
    build_evidence_reference,
    build_evidences,
    build_nationalities,
    build_pep_fields,
    build_profile_images,
    build_rel_entries,
    has_rel_classification,
)
from transform.names import split_name


# ============================================
# FIXTURES
# ============================================


@pytest.fixture
def policy():
    return TransformPolicy()


# ============================================
# PERSON FIELDS
# ============================================


class TestPersonFields:
    """Tests for nationalities and dates of birth."""

    def test_nationalities_are_split_upper_cased_and_unique(self):
        row = {"nationalities": "gb, us; GB | fr"}
        assert build_nationalities(row) == ["GB", "US", "FR"]

    def test_dates_of_birth_combine_triple_and_pasted_cell(self, policy):
        row = {
            "dob_day": "1", "dob_month": "2", "dob_year": "1980",
            "dates_of_birth": "1-2-1980; 3/4/1975",
        }
        assert build_dates_of_birth(row, policy) == [
            {"day": 1, "month": 2, "year": 1980},
            {"day": 3, "month": 4, "year": 1975},
        ]

    def test_no_dates(self, policy):
        assert build_dates_of_birth({}, policy) == []

    def test_profile_images_are_split_and_unique(self):
        row = {"profile_images": "a.jpg\nb.jpg; a.jpg | "}
        assert build_profile_images(row) == ["a.jpg", "b.jpg"]
        assert build_profile_images({"profile_images": "___"}) == []


# ============================================
# ALIASES
# ============================================


class TestAliases:
    """Tests for alias assembly."""

    def test_order_is_original_script_then_nicknames(self, policy):
        row = {
            "original_script_name": "李 小龍",
            "alias_1": "johnny BOY",
            "alias_2": "the dragon king",
        }
        assert build_aliases(row, policy) == [
            {"firstName": "李", "lastName": "小龍", "type": "Original Script Name"},
            {"firstName": "Johnny", "lastName": "Boy", "type": "Nickname"},
            {"firstName": "The", "middleName": "Dragon", "lastName": "King", "type": "Nickname"},
        ]

    def test_original_script_name_is_not_title_cased(self, policy):
        row = {"original_script_name": "de la CRUZ"}
        assert build_aliases(row, policy) == [
            {"firstName": "de", "middleName": "la", "lastName": "CRUZ", "type": "Original Script Name"},
        ]

    def test_placeholders_are_skipped(self, policy):
        row = {"original_script_name": "___", "alias_1": "__", "alias_2": "Slim"}
        assert build_aliases(row, policy) == [{"lastName": "Slim", "type": "Nickname"}]

    def test_no_aliases(self, policy):
        assert build_aliases({"full_name": "John Doe"}, policy) == []

    def test_name_variation_off_by_default(self, policy):
        assert build_aliases({}, policy, split_name("John Doe")) == []

    def test_name_variation_when_enabled(self):
        policy = TransformPolicy(generate_name_variation=True)
        aliases = build_aliases({"alias_1": "jd"}, policy, split_name("John Doe"))
        assert aliases == [
            {"lastName": "Jd", "type": "Nickname"},
            {"firstName": "Doe", "lastName": "John", "type": "Name Spelling Variation"},
        ]

    def test_name_variation_needs_first_and_last(self):
        policy = TransformPolicy(generate_name_variation=True)
        assert build_aliases({}, policy, split_name("Madonna")) == []


# ============================================
# ADDRESSES
# ============================================


class TestAddresses:
    """Tests for address assembly."""

    def test_requires_country_id_by_default(self, policy):
        assert build_addresses({"address_line1": "1 Main St", "city": "Austin"}, policy) == []

    def test_unparseable_country_id_means_no_address(self, policy):
        assert build_addresses({"country_id": "UK", "city": "London"}, policy) == []

    def test_full_address(self, policy):
        row = {
            "country_id": "12",
            "address_line1": "12 main st",
            "address_line2": "SUITE 4",
            "city": "austin",
            "state": "texas",
            "county": "travis county",
        }
        assert build_addresses(row, policy) == [{
            "addressType": "Business",
            "countryId": 12,
            "line1": "12 Main St",
            "line2": "Suite 4",
            "city": "Austin",
            "county": "Travis County",
        }]

    def test_county_abbreviation_and_postcode_are_upper_cased(self, policy):
        row = {"country_id": "12", "county_abbrev": "tx", "postcode": "sw1a 1aa"}
        assert build_addresses(row, policy) == [{
            "addressType": "Business",
            "countryId": 12,
            "countyAbbrev": "TX",
            "postcode": "SW1A 1AA",
        }]

    def test_state_fills_blank_city(self, policy):
        row = {"country_id": "7", "state": "new south wales"}
        assert build_addresses(row, policy) == [{
            "addressType": "Business",
            "countryId": 7,
            "city": "New South Wales",
        }]

    def test_country_id_optional_when_policy_allows(self):
        policy = TransformPolicy(address_requires_country_id=False)
        assert build_addresses({"address_line1": "1 main st"}, policy) == [{
            "addressType": "Business",
            "line1": "1 Main St",
        }]
        assert build_addresses({"postcode": "78701"}, policy) == [{
            "addressType": "Business",
            "postcode": "78701",
        }]
        assert build_addresses({}, policy) == []


# ============================================
# EVIDENCES
# ============================================


class TestEvidences:
    """Tests for top-level evidence assembly."""

    def test_no_source_no_evidence(self):
        assert build_evidences({"summary": "text only", "day": "1"}) == []

    def test_article_evidence(self):
        row = {
            "article_id": "12345",
            "summary": "",
            "snippet": "Snippet text",
            "day": "1", "month": "2", "year": "2020",
            "url": "https://example.com/a",
        }
        assert build_evidences(row) == [{
            "articleId": "12345",
            "summary": "Snippet text",
            "evidenceDate": {"day": 1, "month": 2, "year": 2020},
        }]

    def test_summary_preferred_over_snippet(self):
        row = {"article_id": "1", "summary": "Summary", "snippet": "Snippet"}
        assert build_evidences(row)[0]["summary"] == "Summary"

    def test_pdf_with_url(self):
        row = {"pdf_filename": "court-filing", "url": "https://example.com/f.pdf"}
        assert build_evidences(row) == [{
            "bulkAssetFilename": "court-filing.pdf",
            "originalUrl": "https://example.com/f.pdf",
            "copyrighted": True,
            "sourceOfWealth": False,
            "credibility": "High",
            "language": "eng",
        }]

    def test_url_only(self):
        row = {"url": "https://example.com/news", "year": "2021", "summary": "Story"}
        assert build_evidences(row) == [{
            "bulkAssetUrl": "https://example.com/news",
            "copyrighted": True,
            "sourceOfWealth": False,
            "credibility": "High",
            "language": "eng",
            "evidenceDate": {"year": 2021},
            "publicationDate": {"year": 2021},
            "summary": "Story",
        }]

    def test_reference_priority(self, policy):
        row = {"article_id": "9", "pdf_filename": "x", "url": "https://example.com"}
        assert build_evidence_reference(row, policy) == {"articleId": "9"}
        row["article_id"] = ""
        assert build_evidence_reference(row, policy) == {"bulkAssetFilename": "x.pdf"}
        row["pdf_filename"] = ""
        assert build_evidence_reference(row, policy) == {"bulkAssetUrl": "https://example.com"}
        row["url"] = ""
        assert build_evidence_reference(row, policy) is None


# ============================================
# REL AND PEP ENTRIES
# ============================================


class TestRelEntries:
    """Tests for REL entry assembly."""

    def test_full_entry(self, policy):
        row = {
            "rel_category": "Sanctions",
            "list_name": "OFAC SDN",
            "event_type": "Listed",
            "article_id": "9",
            "day": "3", "month": "4", "year": "2019",
        }
        assert build_rel_entries(row, policy) == [{
            "category": "Sanctions",
            "subcategory": "OFAC SDN",
            "events": [{
                "type": "Listed",
                "date": {"day": 3, "month": 4, "year": 2019},
                "evidences": [{"articleId": "9"}],
            }],
        }]

    def test_subcategory_wins_over_list_name(self, policy):
        row = {"rel_category": "Sanctions", "rel_subcategory": "Asset Freeze", "list_name": "OFAC"}
        assert build_rel_entries(row, policy)[0]["subcategory"] == "Asset Freeze"

    def test_evidence_id_key_policy(self):
        policy = TransformPolicy(rel_evidence_key="evidenceId")
        row = {"rel_category": "Crime", "event_type": "Arrested", "article_id": "77"}
        event = build_rel_entries(row, policy)[0]["events"][0]
        assert event["evidences"] == [{"evidenceId": "77"}]

    def test_nothing_without_classification(self, policy):
        assert build_rel_entries({"article_id": "1", "year": "2020"}, policy) == []

    def test_include_id(self, policy):
        row = {"rel_id": "55", "rel_category": "Crime", "event_type": "Charged"}
        entry = build_rel_entries(row, policy, include_id=True)[0]
        assert entry["id"] == "55"
        assert list(entry) == ["id", "category", "events"]

    def test_has_rel_classification_needs_both(self):
        assert has_rel_classification({"rel_category": "Crime", "event_type": "Charged"})
        assert not has_rel_classification({"rel_category": "Crime"})
        assert not has_rel_classification({"event_type": "Charged"})


class TestPepFields:
    """Tests for PEP tier and entries."""

    def test_full_pep_entry(self):
        row = {
            "pep_tier": "PEP Tier 1",
            "pep_segment": "Legislative",
            "pep_position": "Member of Parliament",
            "pep_category": "National",
            "country_iso_code": "gb",
            "from_year": "2010",
            "to_day": "5", "to_month": "6", "to_year": "2015",
            "article_id": "31",
            "pdf_filename": "ignored",
        }
        assert build_pep_fields(row) == {
            "pepTier": "PEP Tier 1",
            "currentPepEntries": [{
                "segment": "Legislative",
                "position": "Member of Parliament",
                "category": "National",
                "countryIsoCode": "GB",
                "dateFrom": {"year": 2010},
                "dateTo": {"day": 5, "month": 6, "year": 2015},
                "evidences": [{"articleId": "31"}],
            }],
        }

    def test_tier_without_entry(self):
        row = {"pep_tier": "PEP Tier 2", "country_iso_code": "us", "from_year": "2001"}
        assert build_pep_fields(row) == {"pepTier": "PEP Tier 2"}

    def test_entry_with_position_only(self):
        assert build_pep_fields({"pep_position": "Mayor"}) == {
            "currentPepEntries": [{"position": "Mayor"}],
        }

    def test_empty(self):
        assert build_pep_fields({}) == {}
