"""
Typed views of the JSON documents kept by the document store.

Every record allows extra keys: restaurants and NGOs submit free-form
fields (name, quantity, pickup windows, ...) that are stored as-is, so
only the fields the server sets itself are strictly typed. Client
values, `null` included, survive the round trip; fields nobody set are
left out.
"""
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class DocumentRecord(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude_unset=True)


class ServingRecord(DocumentRecord):
    """One unit of food served today"""
    id: Any = None
    date: Any = None


class ArchiveEntry(DocumentRecord):
    """One calendar date of archived servings in the model data"""
    date: str
    items: List[Any] = Field(default_factory=list)


class FoodItem(DocumentRecord):
    id: str
    status: Literal["available", "reserved"] = "available"
    createdAt: Optional[str] = None
    reservedAt: Any = None


class RequestRecord(DocumentRecord):
    """A pickup request created from a saved cart item"""
    id: Any = None
    name: Any = None
    quantity: Any = None
    estimatedValue: Any = None
    restaurant: Any = None
    reservedAt: Any = None
    pickupStartTime: Any = None
    pickupEndTime: Any = None
    status: str = "booked"

    @classmethod
    def from_cart_item(cls, item: Dict[str, Any]) -> "RequestRecord":
        return cls(
            id=item.get("id"),
            name=item.get("name"),
            quantity=item.get("quantity"),
            estimatedValue=item.get("estimatedValue"),
            restaurant=item.get("restaurant"),
            reservedAt=item.get("reservedAt"),
            pickupStartTime=item.get("pickupStartTime"),
            pickupEndTime=item.get("pickupEndTime"),
            status="booked",
        )

    def to_document(self) -> Dict[str, Any]:
        # Cart-derived requests keep every projected key, even when empty
        return self.model_dump(mode="json")


class Event(DocumentRecord):
    id: Any = None
    date: Any = None


class Feedback(DocumentRecord):
    id: str
    submittedAt: str
    organizationName: Any = None
    reviewFor: Any = None
    rating: Any = None
    content: Any = None
    menuItem: Any = None


class Review(BaseModel):
    """Public review card derived from an NGO feedback submission"""
    id: Any = None
    reviewerName: Any = None
    reviewerType: str = "ngo"
    targetName: Any = None
    targetType: str = "restaurant"
    rating: Any = None
    comment: Any = None
    date: Any = None
    foodItem: Any = ""
    helpful: int = 0
    verified: bool = True

    @classmethod
    def from_feedback(cls, item: Dict[str, Any]) -> "Review":
        return cls(
            id=item.get("id"),
            reviewerName=item.get("organizationName"),
            targetName=item.get("reviewFor"),
            rating=item.get("rating"),
            comment=item.get("content"),
            date=item.get("submittedAt"),
            foodItem=item.get("menuItem") or "",
        )
