"""
Pydantic schema of the generated JSON document

Mirrors the fixed shape expected by the receiving system. Used to check
a generated document before it is handed over; the transformation
engine itself does not depend on it.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, StrictBool, StrictInt, model_validator

STRICT = {"extra": "forbid"}


class PartialDate(BaseModel):
    """Date with any subset of day, month and year."""
    day: Optional[StrictInt] = None
    month: Optional[StrictInt] = None
    year: Optional[StrictInt] = None

    model_config = STRICT

    @model_validator(mode='after')
    def require_one_part(self) -> 'PartialDate':
        if self.day is None and self.month is None and self.year is None:
            raise ValueError("A date needs at least one of day, month, year")
        return self


class Alias(BaseModel):
    """Alternative name of an individual."""
    firstName: Optional[str] = Field(default=None, min_length=1)
    middleName: Optional[str] = Field(default=None, min_length=1)
    lastName: Optional[str] = Field(default=None, min_length=1)
    type: str = Field(..., description="Original Script Name, Nickname or Name Spelling Variation")

    model_config = STRICT


class Address(BaseModel):
    addressType: str = Field(..., min_length=1)
    countryId: Optional[StrictInt] = None
    line1: Optional[str] = Field(default=None, min_length=1)
    line2: Optional[str] = Field(default=None, min_length=1)
    city: Optional[str] = Field(default=None, min_length=1)
    county: Optional[str] = Field(default=None, min_length=1)
    countyAbbrev: Optional[str] = Field(default=None, min_length=1)
    postcode: Optional[str] = Field(default=None, min_length=1)

    model_config = STRICT


class Evidence(BaseModel):
    """Source citation: an article, or a bulk PDF/URL asset."""
    articleId: Optional[str] = Field(default=None, min_length=1)
    bulkAssetFilename: Optional[str] = Field(default=None, min_length=1)
    bulkAssetUrl: Optional[str] = Field(default=None, min_length=1)
    originalUrl: Optional[str] = Field(default=None, min_length=1)
    copyrighted: Optional[StrictBool] = None
    sourceOfWealth: Optional[StrictBool] = None
    credibility: Optional[str] = Field(default=None, min_length=1)
    language: Optional[str] = Field(default=None, min_length=1)
    summary: Optional[str] = Field(default=None, min_length=1)
    evidenceDate: Optional[PartialDate] = None
    publicationDate: Optional[PartialDate] = None

    model_config = STRICT

    @model_validator(mode='after')
    def require_source(self) -> 'Evidence':
        if not (self.articleId or self.bulkAssetFilename or self.bulkAssetUrl):
            raise ValueError("Evidence needs an articleId, bulkAssetFilename or bulkAssetUrl")
        return self


class EvidenceReference(BaseModel):
    """Pointer from an entry to an evidence."""
    articleId: Optional[str] = Field(default=None, min_length=1)
    evidenceId: Optional[str] = Field(default=None, min_length=1)
    bulkAssetFilename: Optional[str] = Field(default=None, min_length=1)
    bulkAssetUrl: Optional[str] = Field(default=None, min_length=1)

    model_config = STRICT

    @model_validator(mode='after')
    def require_single_key(self) -> 'EvidenceReference':
        present = [v for v in (self.articleId, self.evidenceId,
                               self.bulkAssetFilename, self.bulkAssetUrl) if v]
        if len(present) != 1:
            raise ValueError("An evidence reference carries exactly one key")
        return self


class RelEvent(BaseModel):
    type: Optional[str] = Field(default=None, min_length=1)
    date: Optional[PartialDate] = None
    evidences: Optional[List[EvidenceReference]] = Field(default=None, min_length=1)

    model_config = STRICT


class RelEntry(BaseModel):
    id: Optional[str] = Field(default=None, min_length=1)
    category: Optional[str] = Field(default=None, min_length=1)
    subcategory: Optional[str] = Field(default=None, min_length=1)
    events: Optional[List[RelEvent]] = Field(default=None, min_length=1, max_length=1)

    model_config = STRICT


class PepEntry(BaseModel):
    segment: Optional[str] = Field(default=None, min_length=1)
    position: Optional[str] = Field(default=None, min_length=1)
    category: Optional[str] = Field(default=None, min_length=1)
    countryIsoCode: Optional[str] = Field(default=None, min_length=1)
    dateFrom: Optional[PartialDate] = None
    dateTo: Optional[PartialDate] = None
    evidences: Optional[List[EvidenceReference]] = Field(default=None, min_length=1)

    model_config = STRICT

    @model_validator(mode='after')
    def require_role(self) -> 'PepEntry':
        if not (self.segment or self.position or self.category):
            raise ValueError("A PEP entry needs a segment, position or category")
        return self


class PersonRecord(BaseModel):
    """One individual: a new record (named) or a partial update (referenceNumber)."""
    referenceNumber: Optional[str] = Field(default=None, min_length=1)
    firstName: Optional[str] = Field(default=None, min_length=1)
    middleName: Optional[str] = Field(default=None, min_length=1)
    lastName: Optional[str] = Field(default=None, min_length=1)
    gender: Optional[str] = Field(default=None, min_length=1)
    isDead: Optional[StrictBool] = None
    nationalities: Optional[List[str]] = Field(default=None, min_length=1)
    datesOfBirth: Optional[List[PartialDate]] = Field(default=None, min_length=1)
    datesOfDeath: Optional[List[PartialDate]] = Field(default=None, min_length=1)
    profileImages: Optional[List[str]] = Field(default=None, min_length=1)
    aliases: Optional[List[Alias]] = Field(default=None, min_length=1)
    evidences: Optional[List[Evidence]] = Field(default=None, min_length=1)
    addresses: Optional[List[Address]] = Field(default=None, min_length=1)
    pepTier: Optional[str] = Field(default=None, min_length=1)
    currentPepEntries: Optional[List[PepEntry]] = Field(default=None, min_length=1)
    relEntries: Optional[List[RelEntry]] = Field(default=None, min_length=1)

    model_config = STRICT

    @model_validator(mode='after')
    def check_profile_keys(self) -> 'PersonRecord':
        if self.currentPepEntries and self.relEntries:
            raise ValueError("A record carries either currentPepEntries or relEntries, not both")
        if self.referenceNumber and (self.firstName or self.middleName or self.lastName):
            raise ValueError("Update records are keyed by referenceNumber, not by name")
        return self


class OutputDocument(BaseModel):
    """The collection wrapper handed to the receiving system."""
    individuals: List[PersonRecord] = Field(default_factory=list)

    model_config = STRICT


def validate_document(document: Dict[str, Any]) -> OutputDocument:
    """Parse a generated document against the schema

    Raises:
        pydantic.ValidationError: If the document does not conform
    """
    return OutputDocument.model_validate(document)
