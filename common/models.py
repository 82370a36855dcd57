## common/models.py

from dataclasses import dataclass, field, fields, asdict
from typing import Any, Dict, List, Mapping, Optional
import yaml


@dataclass
class ContractorProfile:
    # Business
    business_name: str = ""
    trade: str = ""
    license_number: str = ""

    # Person
    first_name: str = ""
    last_name: str = ""
    display_name: str = ""

    # Contact
    phone: str = ""     # canonical in storage, may be display-formatted while editing
    zip: str = ""

    # Location
    city: str = ""
    state: str = ""
    country: str = ""

    # Media
    profile_image_url: str = ""

    @classmethod
    def field_names(cls) -> List[str]:
        return [f.name for f in fields(cls)]

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "ContractorProfile":
        """Build from a store row / request body. Unknown keys are ignored, None becomes ""."""
        if not data:
            return cls()
        known = set(cls.field_names())
        return cls(**{k: ("" if v is None else str(v)) for k, v in data.items() if k in known})

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)

    def copy(self, **changes: str) -> "ContractorProfile":
        data = self.to_dict()
        data.update(changes)
        return ContractorProfile(**data)

    def summarize(self) -> str:
        data = {
            "business": {
                "name": self.business_name or "unknown",
                "trade": self.trade or "unknown",
                "license_number": self.license_number or None,
            },
            "person": {
                "first_name": self.first_name or "unknown",
                "last_name": self.last_name or None,
                "display_name": self.display_name or None,
            },
            "contact": {
                "phone": self.phone or "unknown",
                "zip": self.zip or "unknown",
            },
            "location": {
                "city": self.city or "unknown",
                "state": self.state or "unknown",
                "country": self.country or None,
            },
            "image": self.profile_image_url or None,
        }
        return yaml.dump(data, sort_keys=False)


@dataclass
class Notification:
    message: str
    color: str = "primary"


@dataclass
class AlertButton:
    text: str
    role: str


@dataclass
class ProfilePageState:
    """Read-only snapshot of what the edit page shows."""
    user_id: str = ""
    form: ContractorProfile = field(default_factory=ContractorProfile)
    services: List[Dict[str, Any]] = field(default_factory=list)
    states: List[Dict[str, Any]] = field(default_factory=list)
    user_badge: Optional[Dict[str, Any]] = None
    review_count: int = 0
    is_loading: bool = False

