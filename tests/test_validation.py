"""
Tests for record and schema ID validation.
"""
import copy

import pytest

from src.markup.validation import validate_record, validate_schema_id


PRODUCT = {
    "type": "product",
    "name": "  Trail Shoe  ",
    "description": "Lightweight trail runner",
    "productData": {
        "name": "Trail Shoe X",
        "image": "https://example.com/shoe.jpg",
        "brand": "Acme",
        "sku": "TS-1",
        "price": "129.99",
        "availability": "InStock",
        "url": "https://example.com/shoe",
        "aggregateRating": {"ratingValue": 4.5, "reviewCount": 12},
    },
}


def _product(**data_overrides):
    payload = copy.deepcopy(PRODUCT)
    payload["productData"].update(data_overrides)
    return payload


def _paths(result):
    return [e.path for e in result.errors]


# ───────── Discriminator ─────────


class TestDiscriminator:
    def test_missing_type(self):
        result = validate_record({"name": "x"})
        assert not result.success
        assert result.data is None
        assert _paths(result) == ["type"]

    def test_unknown_type(self):
        result = validate_record({"type": "movie", "name": "x"})
        assert not result.success
        assert _paths(result) == ["type"]
        assert "product" in result.errors[0].message

    def test_type_is_case_sensitive(self):
        assert not validate_record({"type": "faq", "name": "x"}).success

    def test_non_string_type(self):
        assert not validate_record({"type": ["product"], "name": "x"}).success

    @pytest.mark.parametrize("payload", [None, [], "product", 42])
    def test_non_object_payload(self, payload):
        result = validate_record(payload)
        assert not result.success
        assert len(result.errors) >= 1


# ───────── Product ─────────


class TestProduct:
    def test_valid_product(self):
        result = validate_record(copy.deepcopy(PRODUCT))
        assert result.success
        assert result.errors == []
        data = result.data
        assert data["type"] == "product"
        assert data["name"] == "Trail Shoe"
        assert data["dynamic"] is False
        assert data["productData"]["priceCurrency"] == "USD"
        assert data["productData"]["availability"] == "InStock"
        assert data["productData"]["aggregateRating"] == {"ratingValue": 4.5, "reviewCount": 12}

    def test_unset_optional_fields_are_dropped(self):
        result = validate_record({"type": "product", "name": "A", "productData": {"name": "A"}})
        assert result.success
        assert result.data["productData"] == {"name": "A", "priceCurrency": "USD"}
        assert "description" not in result.data

    def test_unknown_keys_are_dropped(self):
        payload = _product(color="red")
        payload["extra"] = 1
        result = validate_record(payload)
        assert result.success
        assert "color" not in result.data["productData"]
        assert "extra" not in result.data

    def test_dynamic_flag_kept(self):
        payload = copy.deepcopy(PRODUCT)
        payload["dynamic"] = True
        assert validate_record(payload).data["dynamic"] is True

    def test_dynamic_must_be_bool(self):
        payload = copy.deepcopy(PRODUCT)
        payload["dynamic"] = "yes"
        result = validate_record(payload)
        assert not result.success
        assert _paths(result) == ["dynamic"]

    def test_missing_product_data(self):
        payload = copy.deepcopy(PRODUCT)
        del payload["productData"]
        result = validate_record(payload)
        assert _paths(result) == ["productData"]

    def test_blank_product_name(self):
        result = validate_record(_product(name="   "))
        assert _paths(result) == ["productData.name"]

    def test_name_too_long(self):
        payload = copy.deepcopy(PRODUCT)
        payload["name"] = "x" * 201
        assert _paths(validate_record(payload)) == ["name"]

    @pytest.mark.parametrize("price", ["12.345", "abc", "-1", "12.", "10\n"])
    def test_invalid_price(self, price):
        result = validate_record(_product(price=price))
        assert _paths(result) == ["productData.price"]
        assert result.errors[0].message == "Invalid price format"

    @pytest.mark.parametrize("price", ["0", "10", "10.5", "10.55"])
    def test_valid_price(self, price):
        assert validate_record(_product(price=price)).success

    @pytest.mark.parametrize("price", ["١٢٣", "１０.５", "12.٥٠"])
    def test_price_digits_must_be_ascii(self, price):
        result = validate_record(_product(price=price))
        assert _paths(result) == ["productData.price"]

    @pytest.mark.parametrize("bound", [float("inf"), float("-inf"), float("nan")])
    def test_non_finite_rating_bound_rejected(self, bound):
        rating = {"ratingValue": 4, "reviewCount": 1, "bestRating": bound}
        result = validate_record(_product(aggregateRating=rating))
        assert _paths(result) == ["productData.aggregateRating.bestRating"]

    def test_non_finite_rating_value_rejected(self):
        rating = {"ratingValue": float("nan"), "reviewCount": 1}
        result = validate_record(_product(aggregateRating=rating))
        assert _paths(result) == ["productData.aggregateRating.ratingValue"]

    def test_invalid_url(self):
        result = validate_record(_product(image="not a url"))
        assert _paths(result) == ["productData.image"]
        assert result.errors[0].message == "Must be a valid URL"

    def test_url_kept_verbatim(self):
        result = validate_record(_product(url="https://example.com/shoe"))
        assert result.data["productData"]["url"] == "https://example.com/shoe"

    def test_currency_must_be_three_chars(self):
        assert _paths(validate_record(_product(priceCurrency="EURO"))) == ["productData.priceCurrency"]
        assert validate_record(_product(priceCurrency="EUR")).data["productData"]["priceCurrency"] == "EUR"

    def test_invalid_availability(self):
        assert _paths(validate_record(_product(availability="Sold"))) == ["productData.availability"]

    def test_rating_out_of_range(self):
        result = validate_record(_product(aggregateRating={"ratingValue": 7, "reviewCount": 1}))
        assert _paths(result) == ["productData.aggregateRating.ratingValue"]

    def test_rating_rejects_bool_and_string(self):
        for bad in (True, "4"):
            result = validate_record(_product(aggregateRating={"ratingValue": bad, "reviewCount": 1}))
            assert _paths(result) == ["productData.aggregateRating.ratingValue"]

    def test_integer_rating_stays_integer(self):
        result = validate_record(_product(aggregateRating={"ratingValue": 4, "reviewCount": 3}))
        rating = result.data["productData"]["aggregateRating"]
        assert rating["ratingValue"] == 4
        assert isinstance(rating["ratingValue"], int)

    def test_review_count_must_be_non_negative_int(self):
        for bad in (-1, 2.5):
            result = validate_record(_product(aggregateRating={"ratingValue": 4, "reviewCount": bad}))
            assert _paths(result) == ["productData.aggregateRating.reviewCount"]

    def test_all_violations_reported_together(self):
        payload = _product(name="", price="free", image="nope")
        payload["name"] = "y" * 300
        result = validate_record(payload)
        assert not result.success
        assert sorted(_paths(result)) == sorted([
            "name",
            "productData.name",
            "productData.image",
            "productData.price",
        ])


# ───────── Other kinds ─────────


ADDRESS = {
    "streetAddress": "1 Main St",
    "addressLocality": "Springfield",
    "addressRegion": "IL",
    "postalCode": "62701",
    "addressCountry": "US",
}


class TestOtherKinds:
    def test_organization(self):
        result = validate_record({
            "type": "organization",
            "name": "Acme",
            "organizationData": {
                "name": "Acme Inc",
                "url": "https://acme.example",
                "contactPoint": {"telephone": "+1 (555) 010-0000", "email": "help@acme.com"},
                "address": ADDRESS,
            },
        })
        assert result.success
        assert result.data["organizationData"]["contactPoint"]["email"] == "help@acme.com"

    def test_organization_bad_contact(self):
        result = validate_record({
            "type": "organization",
            "name": "Acme",
            "organizationData": {
                "name": "Acme Inc",
                "contactPoint": {"telephone": "call me", "email": "not-an-email"},
            },
        })
        assert sorted(_paths(result)) == [
            "organizationData.contactPoint.email",
            "organizationData.contactPoint.telephone",
        ]

    def test_partial_address_rejected(self):
        result = validate_record({
            "type": "localBusiness",
            "name": "Cafe",
            "businessData": {"name": "Cafe", "address": {"streetAddress": "1 Main St"}},
        })
        assert not result.success
        assert "businessData.address.postalCode" in _paths(result)

    def test_article_dates(self):
        base = {"type": "article", "name": "Post", "articleData": {"headline": "Hi", "author": "Ann"}}
        ok = copy.deepcopy(base)
        ok["articleData"]["datePublished"] = "2024-05-01T10:00:00Z"
        ok["articleData"]["dateModified"] = "2024-05-02T10:00:00.123+02:00"
        assert validate_record(ok).success

        bad = copy.deepcopy(base)
        bad["articleData"]["datePublished"] = "2024-05-01"
        assert _paths(validate_record(bad)) == ["articleData.datePublished"]

        impossible = copy.deepcopy(base)
        impossible["articleData"]["datePublished"] = "2024-13-45T10:00:00Z"
        assert _paths(validate_record(impossible)) == ["articleData.datePublished"]

    @pytest.mark.parametrize("telephone", ["+١ ٥٥٥ ٠١٠", "５５５-０１００"])
    def test_phone_digits_must_be_ascii(self, telephone):
        result = validate_record({
            "type": "localBusiness",
            "name": "Cafe",
            "businessData": {"name": "Cafe", "telephone": telephone},
        })
        assert _paths(result) == ["businessData.telephone"]

    def test_article_date_digits_must_be_ascii(self):
        result = validate_record({
            "type": "article",
            "name": "Post",
            "articleData": {"headline": "Hi", "author": "Ann", "datePublished": "٢٠٢٤-05-01T10:00:00Z"},
        })
        assert _paths(result) == ["articleData.datePublished"]

    def test_article_requires_author(self):
        result = validate_record({"type": "article", "name": "Post", "articleData": {"headline": "Hi"}})
        assert _paths(result) == ["articleData.author"]

    def test_website_requires_url(self):
        result = validate_record({"type": "website", "name": "Site", "websiteData": {"name": "Site"}})
        assert _paths(result) == ["websiteData.url"]

    def test_event(self):
        result = validate_record({
            "type": "event",
            "name": "Launch",
            "eventData": {
                "name": "Launch",
                "startDate": "2025-01-01T18:00:00Z",
                "eventStatus": "EventScheduled",
                "location": {"name": "Hall", "address": ADDRESS},
            },
        })
        assert result.success

    def test_event_requires_start_date(self):
        result = validate_record({"type": "event", "name": "Launch", "eventData": {"name": "Launch"}})
        assert _paths(result) == ["eventData.startDate"]

    def test_person_same_as_urls(self):
        result = validate_record({
            "type": "person",
            "name": "Ann",
            "personData": {"name": "Ann", "sameAs": ["https://a.example", "nope"]},
        })
        assert _paths(result) == ["personData.sameAs.1"]

    def test_recipe_nutrition(self):
        result = validate_record({
            "type": "recipe",
            "name": "Soup",
            "recipeData": {"name": "Soup", "nutrition": {"calories": "200 kcal"}},
        })
        assert result.success
        assert result.data["recipeData"]["nutrition"] == {"calories": "200 kcal"}

    def test_review_defaults_rating_bounds(self):
        result = validate_record({
            "type": "review",
            "name": "Great",
            "reviewData": {
                "itemReviewed": {"name": "Trail Shoe"},
                "reviewRating": {"ratingValue": 4},
                "author": {"name": "Ann"},
            },
        })
        assert result.success
        assert result.data["reviewData"]["reviewRating"] == {
            "ratingValue": 4, "bestRating": 5, "worstRating": 1,
        }

    def test_review_rating_minimum_is_one(self):
        result = validate_record({
            "type": "review",
            "name": "Bad",
            "reviewData": {
                "itemReviewed": {"name": "X"},
                "reviewRating": {"ratingValue": 0},
                "author": {"name": "Ann"},
            },
        })
        assert _paths(result) == ["reviewData.reviewRating.ratingValue"]

    def test_faq_needs_a_question(self):
        result = validate_record({"type": "FAQ", "name": "Help", "faqData": {"questions": []}})
        assert _paths(result) == ["faqData.questions"]

    def test_faq_blank_answer(self):
        result = validate_record({
            "type": "FAQ",
            "name": "Help",
            "faqData": {"questions": [{"question": "Why?", "answer": " "}]},
        })
        assert _paths(result) == ["faqData.questions.0.answer"]


# ───────── Schema ID ─────────


class TestSchemaId:
    @pytest.mark.parametrize("value", ["abc-123_XYZ", "a", "x" * 50, "V1StGXR8_Z"])
    def test_valid(self, value):
        result = validate_schema_id(value)
        assert result.success
        assert result.error is None

    @pytest.mark.parametrize("value", ["", None, "has space", "x" * 51, "abc/def", "abc\n", 123, "é"])
    def test_invalid(self, value):
        result = validate_schema_id(value)
        assert not result.success
        assert result.error
