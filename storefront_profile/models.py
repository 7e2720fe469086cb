"""Storefront profile shapes and the small result types the engine returns."""

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from dotenv import load_dotenv


SPECIES = ("Dog", "Cat", "Horse", "Goat", "Sheep", "Rabbit")

LOCATION_MODES = ("hidden", "zip_only", "city_state", "full")

ADDRESS_FIELDS = ("streetAddress", "streetAddress2", "city", "state", "zip", "country")

# category list key -> (show flag, note key)
CREDENTIAL_CATEGORIES = {
    "registrations": ("showRegistrations", "registrationsNote"),
    "healthPractices": ("showHealthPractices", "healthNote"),
    "breedingPractices": ("showBreedingPractices", "breedingNote"),
    "carePractices": ("showCarePractices", "careNote"),
}
CREDENTIAL_NOTE_LIMIT = 200

POLICY_FLAGS = (
    "requireApplication",
    "requireInterview",
    "requireContract",
    "requireDeposit",
    "requireReservationFee",
    "depositRefundable",
    "requireHomeVisit",
    "requireVetReference",
    "requireSpayNeuter",
    "hasReturnPolicy",
    "lifetimeTakeBack",
    "offersSupport",
)

# Flags that existed before showPolicies did; any of them set means the
# stored row was already showing its policies.
LEGACY_POLICY_FLAGS = (
    "requireApplication",
    "requireInterview",
    "requireContract",
    "requireDeposit",
    "requireHomeVisit",
    "requireVetReference",
    "requireSpayNeuter",
    "hasReturnPolicy",
    "lifetimeTakeBack",
    "offersSupport",
)
POLICY_NOTE_LIMIT = 300

# visibility flag -> content field it exposes
VISIBILITY_FLAGS = {
    "showBusinessIdentity": "businessName",
    "showLogo": "logoUrl",
    "showBanner": "bannerImageUrl",
    "showWebsite": "websiteUrl",
    "showInstagram": "instagram",
    "showFacebook": "facebook",
}


def to_ui_species(value: Any) -> str:
    """Title-case a stored species, falling back to Dog.

    >>> to_ui_species("HORSE")
    'Horse'
    >>> to_ui_species(None)
    'Dog'
    """
    if not isinstance(value, str) or not value:
        return "Dog"
    species = value.capitalize()
    return species if species in SPECIES else "Dog"


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, set, dict)):
        return len(value) == 0
    return False


@dataclass
class BreedEntry:
    name: str
    species: str = "Dog"
    breed_id: int | None = None
    custom_breed_id: int | None = None
    source: str = "canonical"  # "canonical" or "custom"
    is_public: bool = False

    @property
    def identity(self) -> tuple[str, str]:
        return (self.name.lower(), self.species)

    def to_dict(self) -> dict[str, Any]:
        custom = self.source == "custom"
        return {
            "name": self.name,
            "species": self.species,
            "breedId": None if custom else self.breed_id,
            "customBreedId": self.custom_breed_id if custom else None,
            "source": self.source,
            "isPublic": self.is_public,
        }


def breed_identity(entry: dict[str, Any]) -> tuple[str, str]:
    return (str(entry.get("name", "")).lower(), entry.get("species") or "Dog")


def is_program_complete(program: dict[str, Any]) -> bool:
    """A program is public-eligible once both its name and breed are filled in."""
    return not is_blank(program.get("name")) and not is_blank(program.get("breedText"))


def new_program() -> dict[str, Any]:
    return {
        "name": "",
        "species": "DOG",
        "breedText": "",
        "breedId": None,
        "description": "",
        "programStory": "",
        "acceptInquiries": True,
        "openWaitlist": False,
        "acceptReservations": False,
        "comingSoon": False,
        "pricingTiers": None,
        "whatsIncluded": "",
        "showWhatsIncluded": True,
        "typicalWaitTime": "",
        "showWaitTime": True,
        "coverImageUrl": None,
        "showCoverImage": True,
    }


class PublishStatus(str, Enum):
    UNPUBLISHED = "unpublished"
    PUBLISHED = "published"

    @classmethod
    def from_published_at(cls, published_at: str | None) -> "PublishStatus":
        return cls.PUBLISHED if published_at else cls.UNPUBLISHED


@dataclass(frozen=True)
class Outcome:
    """Result of a form edit: the next state, or the unchanged state and a reason."""

    state: dict[str, Any]
    reason: str | None = None

    @property
    def ok(self) -> bool:
        return self.reason is None


@dataclass(frozen=True)
class RemovalCheck:
    allowed: bool
    reason: str | None = None


@dataclass(frozen=True)
class PublishIssue:
    field: str
    message: str


@dataclass(frozen=True)
class ActionResult:
    ok: bool
    message: str = ""
    issues: list[PublishIssue] = field(default_factory=list)


@dataclass
class ProfileSnapshot:
    published: dict[str, Any] | None = None
    draft: dict[str, Any] | None = None
    published_at: str | None = None
    draft_updated_at: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "ProfileSnapshot":
        data = data or {}
        published = data.get("published")
        draft = data.get("draft")
        return cls(
            published=published if isinstance(published, dict) else None,
            draft=draft if isinstance(draft, dict) else None,
            published_at=data.get("publishedAt"),
            draft_updated_at=data.get("draftUpdatedAt"),
        )


@dataclass(frozen=True)
class TenantContext:
    tenant_id: str
    api_base_url: str = "http://localhost:6001"
    timeout: float = 60.0

    @classmethod
    def from_env(cls) -> "TenantContext":
        load_dotenv()
        tenant_id = os.getenv("STOREFRONT_TENANT_ID")
        if not tenant_id:
            raise ValueError("STOREFRONT_TENANT_ID not set.")
        return cls(
            tenant_id=tenant_id,
            api_base_url=os.getenv("STOREFRONT_API_URL", "http://localhost:6001"),
            timeout=float(os.getenv("STOREFRONT_API_TIMEOUT", "60")),
        )
