"""Shared DBML sources for the round-trip tests."""

import pytest


ORIGINAL_SCHEMA = '''// Project schema
// maintained by hand

Enum status {
  active
  archived
}

// Users of the app
Table users {
  // identity columns
  "id" int [pk] // primary key
  "email" varchar
}

/* Orders placed
   by users */
Table "sales"."orders" {
  "id" int [pk]
  "user_id" int // owner
}

Ref: "sales"."orders"."user_id" > "users"."id"

// end of schema
'''

REGENERATED_SCHEMA = '''Enum "status" {
  "active"
  "archived"
}

Table "sales"."orders" {
  "id" int [pk]
  "user_id" int
}

Table "users" {
  "id" int [pk]
  "email" varchar
}

Ref: "sales"."orders"."user_id" > "users"."id"
'''

REORDERED_SCHEMA = '''Enum "status" {
  "active"
  "archived"
}

Table "users" {
  "id" int [pk]
  "email" varchar
}
Table "sales"."orders" {
  "id" int [pk]
  "user_id" int
}

Ref: "sales"."orders"."user_id" > "users"."id"
'''

RESTORED_SCHEMA = '''// Project schema
// maintained by hand

Enum "status" {
  "active"
  "archived"
}

// Users of the app
Table "users" {
  // identity columns
  "id" int [pk] // primary key
  "email" varchar
}
/* Orders placed
   by users */
Table "sales"."orders" {
  "id" int [pk]
  "user_id" int // owner
}

Ref: "sales"."orders"."user_id" > "users"."id"


// end of schema'''


@pytest.fixture
def original_schema():
    """Hand-written schema carrying every comment kind."""
    return ORIGINAL_SCHEMA


@pytest.fixture
def regenerated_schema():
    """The same model as emitted by a generator: no comments, model order."""
    return REGENERATED_SCHEMA


@pytest.fixture
def reordered_schema():
    """Regenerated schema after the original table order is restored."""
    return REORDERED_SCHEMA


@pytest.fixture
def restored_schema():
    """Reordered schema with the original comments merged back in."""
    return RESTORED_SCHEMA
