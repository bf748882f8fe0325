"""Validation tables for the listing API request bodies."""

from __future__ import annotations

from listing_pipeline.stages.validation import FieldRule

INTEREST_OPTIONS = frozenset({"buy", "rent", "shortlet"})

LISTING_CATEGORIES = frozenset({"rent", "sale", "shortlet"})

PROPERTY_TYPES = frozenset(
    {
        "apartment",
        "duplex",
        "house",
        "bungalow",
        "office",
        "shop",
        "warehouse",
        "commercial",
        "plot",
        "land",
        "farm",
        "hotel",
        "event-centre",
    }
)

BUSINESS_TYPES = frozenset({"Business", "Private seller"})

CURRENCIES = frozenset({"ngn", "usd"})

PHONE_PATTERN = r"[+]?[\d\s\-()]{10,}"

USER_PREFERENCES_RULES = (
    FieldRule("interestedIn", list, choices=INTEREST_OPTIONS),
    FieldRule("budget.min", float, minimum=0),
    FieldRule("budget.max", float, minimum=0),
    FieldRule("preferredLocations", list),
    FieldRule("propertyPreferences.types", list),
)

ADD_PROPERTY_RULES = (
    FieldRule(
        "title",
        str,
        required=True,
        min_length=5,
        max_length=100,
        message="Title must be between 5 and 100 characters",
    ),
    FieldRule(
        "description",
        str,
        required=True,
        min_length=20,
        max_length=1500,
        message="Description must be between 20 and 1500 characters",
    ),
    FieldRule(
        "category",
        str,
        required=True,
        choices=LISTING_CATEGORIES,
        message="Category must be rent, sale, or shortlet",
    ),
    FieldRule(
        "propertyType",
        str,
        required=True,
        choices=PROPERTY_TYPES,
        message="Invalid property type",
    ),
    FieldRule(
        "businessType",
        str,
        required=True,
        choices=BUSINESS_TYPES,
        message="Business type must be Business or Private seller",
    ),
    FieldRule("country", str, required=True, min_length=1, message="Country is required"),
    FieldRule("city", str, required=True, min_length=1, message="City is required"),
    FieldRule("district", str, required=True, min_length=1, message="District is required"),
    FieldRule("zipCode", str, required=True, min_length=1, message="Zip code is required"),
    FieldRule("address", str, required=True, min_length=1, message="Address is required"),
    FieldRule(
        "price",
        float,
        required=True,
        minimum=1,
        message="Price must be a positive number",
    ),
    FieldRule(
        "currency",
        str,
        required=True,
        choices=CURRENCIES,
        message="Currency must be NGN or USD",
    ),
    FieldRule(
        "phone",
        str,
        required=True,
        pattern=PHONE_PATTERN,
        message="Invalid phone number format",
    ),
    FieldRule(
        "company",
        str,
        max_length=200,
        message="Company name cannot exceed 200 characters",
    ),
)

WISHLIST_RULES = (
    FieldRule("agent", str, required=True, min_length=1, message="Agent is required"),
    FieldRule("properties", list, message="Properties must be an array"),
)
