"""
Shared fixtures: a small user/pet registry in the shape of an OpenAPI
``components.schemas`` section, plus the record types it casts into.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional

import pytest

from schemacast import Discriminator, Reference, Schema, freeze_registry
from schemacast.parsing import clear_cache


@dataclass
class User:
    id: Optional[int] = None
    name: Optional[str] = None
    email: Optional[str] = None
    inserted_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class UserRequest:
    user: Optional[User] = None


@dataclass
class UserResponse:
    data: Optional[User] = None


@dataclass
class UsersResponse:
    data: Optional[List[User]] = None


@dataclass
class Cat:
    pet_type: Optional[str] = None
    meow: Optional[str] = None


@dataclass
class Dog:
    pet_type: Optional[str] = None
    bark: Optional[str] = None


USER_EXAMPLE: Dict[str, Any] = {
    "id": 123,
    "name": "joe",
    "email": "joe@gmail.com",
    "inserted_at": "2017-09-12T12:34:55Z",
    "updated_at": "2017-09-13T10:11:12Z",
}


def build_schemas() -> Dict[str, Schema]:
    user = Schema(
        title="User",
        description="A user of the app",
        type="object",
        properties={
            "id": Schema(type="integer", format="int64", description="User ID"),
            "name": Schema(type="string", pattern=r"^[a-zA-Z][a-zA-Z0-9_]+$"),
            "email": Schema(type="string", format="email"),
            "inserted_at": Schema(type="string", format="date-time", nullable=True),
            "updated_at": Schema(type="string", format="date-time"),
        },
        required=("name", "email"),
        additional_properties=False,
        target_type=User,
        example=USER_EXAMPLE,
    )
    pet = Schema(
        title="Pet",
        type="object",
        properties={"pet_type": Schema(type="string")},
        required=("pet_type",),
        discriminator=Discriminator(property_name="pet_type"),
    )
    return {
        "User": user,
        "UserRequest": Schema(
            type="object",
            properties={"user": Reference("User")},
            target_type=UserRequest,
            example={"user": USER_EXAMPLE},
        ),
        "UserResponse": Schema(
            type="object",
            properties={"data": Reference("User")},
            target_type=UserResponse,
            example={"data": USER_EXAMPLE},
        ),
        "UsersResponse": Schema(
            type="object",
            properties={"data": Schema(type="array", items=Reference("User"))},
            target_type=UsersResponse,
            example={"data": [USER_EXAMPLE, dict(USER_EXAMPLE, id=234, name="jim")]},
        ),
        "EntityWithDict": Schema(
            type="object",
            properties={
                "id": Schema(type="integer"),
                "stringDict": Schema(type="object", additional_properties=Schema(type="string")),
                "anyTypeDict": Schema(type="object", additional_properties=True),
            },
            example={
                "id": 123,
                "stringDict": {"key1": "value1", "key2": "value2"},
                "anyTypeDict": {"key1": 42, "key2": {"foo": "bar"}},
            },
        ),
        "Pet": pet,
        "Cat": Schema(
            type="object",
            all_of=(
                Reference("Pet"),
                Schema(type="object", properties={"meow": Schema(type="string")}, required=("meow",)),
            ),
            target_type=Cat,
        ),
        "Dog": Schema(
            type="object",
            all_of=(
                Reference("Pet"),
                Schema(type="object", properties={"bark": Schema(type="string")}, required=("bark",)),
            ),
            target_type=Dog,
        ),
        "CatOrDog": Schema(one_of=(Reference("Cat"), Reference("Dog"))),
    }


@pytest.fixture
def schemas():
    return build_schemas()


@pytest.fixture
def registry(schemas):
    return freeze_registry(schemas)


@pytest.fixture(autouse=True)
def _clear_document_cache():
    clear_cache()
    yield
    clear_cache()
