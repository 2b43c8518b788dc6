import pytest
import sys
import os

# Ensure src is in path so we can import schema_forge
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "../src")))

from schema_forge.descriptors import (  # noqa: E402
    EnumCaseDescriptor,
    EnumDescriptor,
    FieldDescriptor,
    RecordDescriptor,
)


@pytest.fixture
def search_priority_enum():
    """String enum with a description and documented cases."""
    return EnumDescriptor(
        name="SearchPriority",
        description="How urgently results are needed.",
        cases=(
            EnumCaseDescriptor("standard", "Normal ranking."),
            EnumCaseDescriptor("high", "Prefer fast availability."),
        ),
    )


@pytest.fixture
def hotel_search_record():
    """Record mixing required, optional, date and enum fields."""
    return RecordDescriptor(
        name="HotelSearch",
        description="Search for available hotel rooms.",
        fields=(
            FieldDescriptor("destination", "String", "City or region."),
            FieldDescriptor("checkInDate", "Date", "Arrival date."),
            FieldDescriptor("checkOutDate", "Date?", "Departure date.", is_optional=True),
            FieldDescriptor("adults", "Int"),
            FieldDescriptor("priority", "SearchPriority"),
        ),
    )


@pytest.fixture
def address_record():
    return RecordDescriptor(
        name="Address",
        description="Postal address.",
        fields=(
            FieldDescriptor("street", "String"),
            FieldDescriptor("postalCode", "String?", is_optional=True),
            FieldDescriptor("deliveryNotes", "[String: Int]"),
        ),
    )


@pytest.fixture
def sample_document():
    """A descriptor document as written by the extractor."""
    return {
        "records": [
            {
                "name": "UserProfile",
                "description": "Represents user profile information.",
                "fields": [
                    {"name": "userId", "type": "Int"},
                    {"name": "fullName", "type": "String?"},
                    {"name": "signupDate", "type": "Date", "description": "Signup time."},
                    {"name": "primaryAddress", "type": "Address"},
                    {"name": "status", "type": "TaskStatus", "optional": False},
                ],
            },
            {
                "name": "Address",
                "fields": [
                    {"name": "street", "type": "String"},
                    {"name": "nestedCoordinates", "type": "[[Int]]?"},
                ],
            },
        ],
        "enums": [
            {
                "name": "TaskStatus",
                "description": "Represents the status of a task.",
                "cases": [
                    {"name": "pending", "description": "Task is pending assignment."},
                    {"name": "active"},
                ],
            }
        ],
    }
