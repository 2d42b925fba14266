"""
Field-group builders

Each builder reads raw cells from one row and returns a list (possibly
empty) or a small dict of output keys. Empty values are dropped with
prune_empty, so nothing here ever surfaces an empty string, list or
object in the final document.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from transform.dates import MIN_PASTED_YEAR, date_from_row, parse_dates
from transform.names import NameParts, split_name
from transform.primitives import (
    cell_value,
    normalize_pdf,
    prune_empty,
    safe_int,
    split_delimited,
    title_case,
    unique,
)

ALIAS_ORIGINAL_SCRIPT = 'Original Script Name'
ALIAS_NICKNAME = 'Nickname'
ALIAS_NAME_VARIATION = 'Name Spelling Variation'
NICKNAME_FIELDS = ('alias_1', 'alias_2')

ADDRESS_TYPE = 'Business'
ADDRESS_TEXT_FIELDS = ('line1', 'line2', 'city', 'county', 'countyAbbrev', 'postcode')

EVIDENCE_CREDIBILITY = 'High'
EVIDENCE_LANGUAGE = 'eng'

NATIONALITY_DELIMITERS = ',;|'


@dataclass(frozen=True)
class TransformPolicy:
    """Rules that changed between revisions of the entry tool

    generate_name_variation: add a reversed-name alias
    rel_evidence_key: 'articleId' or 'evidenceId' inside REL event evidences
    address_requires_country_id: only emit an address with a numeric country id
    min_year: earliest year accepted from a pasted dates cell
    """
    generate_name_variation: bool = False
    rel_evidence_key: str = 'articleId'
    address_requires_country_id: bool = True
    min_year: int = MIN_PASTED_YEAR

    @classmethod
    def from_config(cls, config) -> 'TransformPolicy':
        """Build from a ConfigManager"""
        return cls(
            generate_name_variation=config.policy.generate_name_variation,
            rel_evidence_key=config.policy.rel_evidence_key,
            address_requires_country_id=config.policy.address_requires_country_id,
            min_year=config.validation.min_year,
        )


def _pruned_list(item: Optional[Dict[str, Any]]) -> List[Dict[str, Any]]:
    item = prune_empty(item)
    return [item] if item else []


# ----------------------------------------------------------------------
# Person-level scalar and array fields
# ----------------------------------------------------------------------

def build_gender(row: Mapping[str, Any]) -> str:
    return title_case(cell_value(row, 'gender'))


def build_nationalities(row: Mapping[str, Any]) -> List[str]:
    """Upper-cased nationality codes from a delimited cell, first occurrence kept"""
    return unique(n.upper() for n in split_delimited(cell_value(row, 'nationalities'),
                                                     NATIONALITY_DELIMITERS))


def build_dates_of_birth(row: Mapping[str, Any], policy: TransformPolicy) -> List[Dict[str, int]]:
    """The dob_day/dob_month/dob_year triple followed by any pasted dates"""
    dates = []
    single = date_from_row(row, 'dob_')
    if single:
        dates.append(single)
    dates.extend(parse_dates(cell_value(row, 'dates_of_birth'), policy.min_year))
    return unique(dates)


def build_dates_of_death(row: Mapping[str, Any]) -> List[Dict[str, int]]:
    date = date_from_row(row, 'dod_')
    return [date] if date else []


def build_profile_images(row: Mapping[str, Any]) -> List[str]:
    """Image URLs or filenames, one per line or separated by ';' or '|'"""
    return unique(split_delimited(cell_value(row, 'profile_images')))


# ----------------------------------------------------------------------
# Aliases
# ----------------------------------------------------------------------

def _alias(parts: NameParts, alias_type: str) -> Optional[Dict[str, str]]:
    if not parts.has_valid_part():
        return None
    alias = parts.to_dict()
    alias['type'] = alias_type
    return alias


def build_aliases(row: Mapping[str, Any], policy: TransformPolicy,
                  name_parts: Optional[NameParts] = None) -> List[Dict[str, str]]:
    """Original script name, then nickname 1 and 2, then the optional reversed name

    Args:
        row: Source row
        policy: Transformation policy
        name_parts: Already split primary name (needed for the name variation)
    """
    aliases = []

    original = _alias(split_name(cell_value(row, 'original_script_name'), preserve_original=True),
                      ALIAS_ORIGINAL_SCRIPT)
    if original:
        aliases.append(original)

    for field_name in NICKNAME_FIELDS:
        nickname = cell_value(row, field_name)
        if not nickname:
            continue
        alias = _alias(split_name(title_case(nickname), preserve_original=True), ALIAS_NICKNAME)
        if alias:
            aliases.append(alias)

    if policy.generate_name_variation and name_parts is not None:
        if name_parts.first_name and name_parts.last_name:
            variation = _alias(name_parts.reversed(), ALIAS_NAME_VARIATION)
            if variation:
                aliases.append(variation)

    return aliases


# ----------------------------------------------------------------------
# Addresses
# ----------------------------------------------------------------------

def build_addresses(row: Mapping[str, Any], policy: TransformPolicy) -> List[Dict[str, Any]]:
    """At most one business address; 'state' stands in for a blank city"""
    country_id = safe_int(cell_value(row, 'country_id'))
    if country_id is None and policy.address_requires_country_id:
        return []

    address = {
        'addressType': ADDRESS_TYPE,
        'countryId': country_id,
        'line1': title_case(cell_value(row, 'address_line1')),
        'line2': title_case(cell_value(row, 'address_line2')),
        'city': title_case(cell_value(row, 'city') or cell_value(row, 'state')),
        'county': title_case(cell_value(row, 'county')),
        'countyAbbrev': cell_value(row, 'county_abbrev').upper(),
        'postcode': cell_value(row, 'postcode').upper(),
    }

    if country_id is None and not any(address[k] for k in ADDRESS_TEXT_FIELDS):
        return []

    return _pruned_list(address)


# ----------------------------------------------------------------------
# Evidences
# ----------------------------------------------------------------------

def _summary(row: Mapping[str, Any]) -> str:
    return cell_value(row, 'summary') or cell_value(row, 'snippet')


def has_evidence(row: Mapping[str, Any]) -> bool:
    """Row carries an article id, URL or PDF filename"""
    return any(cell_value(row, key) for key in ('article_id', 'url', 'pdf_filename'))


def build_evidences(row: Mapping[str, Any]) -> List[Dict[str, Any]]:
    """Article evidence when an article id is present, bulk-asset evidence otherwise"""
    if not has_evidence(row):
        return []

    article_id = cell_value(row, 'article_id')
    evidence_date = date_from_row(row)

    if article_id:
        return _pruned_list({
            'articleId': article_id,
            'summary': _summary(row),
            'evidenceDate': evidence_date,
        })

    pdf_filename = normalize_pdf(cell_value(row, 'pdf_filename'))
    url = cell_value(row, 'url')

    evidence: Dict[str, Any] = {}
    if pdf_filename:
        evidence['bulkAssetFilename'] = pdf_filename
        if url:
            evidence['originalUrl'] = url
    else:
        evidence['bulkAssetUrl'] = url

    evidence.update({
        'copyrighted': True,
        'sourceOfWealth': False,
        'credibility': EVIDENCE_CREDIBILITY,
        'language': EVIDENCE_LANGUAGE,
        'evidenceDate': evidence_date,
        'publicationDate': evidence_date,
        'summary': _summary(row),
    })
    return _pruned_list(evidence)


def build_evidence_reference(row: Mapping[str, Any], policy: TransformPolicy) -> Optional[Dict[str, str]]:
    """First available of article id, PDF filename, URL"""
    article_id = cell_value(row, 'article_id')
    if article_id:
        return {policy.rel_evidence_key: article_id}
    pdf_filename = normalize_pdf(cell_value(row, 'pdf_filename'))
    if pdf_filename:
        return {'bulkAssetFilename': pdf_filename}
    url = cell_value(row, 'url')
    if url:
        return {'bulkAssetUrl': url}
    return None


# ----------------------------------------------------------------------
# REL / PEP entries
# ----------------------------------------------------------------------

def has_rel_classification(row: Mapping[str, Any]) -> bool:
    """Row has both a REL category and an event type"""
    return bool(cell_value(row, 'rel_category') and cell_value(row, 'event_type'))


def build_rel_entries(row: Mapping[str, Any], policy: TransformPolicy,
                      include_id: bool = False) -> List[Dict[str, Any]]:
    """One REL entry holding a single event

    Nothing is built unless the row has a category, subcategory (or list
    name) or event type.
    """
    category = cell_value(row, 'rel_category')
    subcategory = cell_value(row, 'rel_subcategory') or cell_value(row, 'list_name')
    event_type = cell_value(row, 'event_type')
    if not (category or subcategory or event_type):
        return []

    reference = build_evidence_reference(row, policy)
    event = {
        'type': event_type,
        'date': date_from_row(row),
        'evidences': [reference] if reference else [],
    }

    entry: Dict[str, Any] = {}
    if include_id:
        entry['id'] = cell_value(row, 'rel_id')
    entry.update({
        'category': category,
        'subcategory': subcategory,
        'events': [event],
    })
    return _pruned_list(entry)


def build_pep_fields(row: Mapping[str, Any]) -> Dict[str, Any]:
    """pepTier and currentPepEntries; the entry needs a segment, position or category"""
    result: Dict[str, Any] = {}

    pep_tier = cell_value(row, 'pep_tier')
    if pep_tier:
        result['pepTier'] = pep_tier

    segment = cell_value(row, 'pep_segment')
    position = cell_value(row, 'pep_position')
    category = cell_value(row, 'pep_category')
    if not (segment or position or category):
        return result

    article_id = cell_value(row, 'article_id')
    entry = {
        'segment': segment,
        'position': position,
        'category': category,
        'countryIsoCode': cell_value(row, 'country_iso_code').upper(),
        'dateFrom': date_from_row(row, 'from_'),
        'dateTo': date_from_row(row, 'to_'),
        'evidences': [{'articleId': article_id}] if article_id else [],
    }
    entries = _pruned_list(entry)
    if entries:
        result['currentPepEntries'] = entries
    return result
