"""
Schema.org JSON-LD generation.

All builders are pure: same input, same output, key order included.
Optional inputs that are absent are left out of the document.
"""
import json
from typing import Any, Optional

from src.shared.errors import SchemaError

SCHEMA_CONTEXT = "https://schema.org"


def _schema_uri(value: str) -> str:
    return f"{SCHEMA_CONTEXT}/{value}"


def _compact(doc: dict) -> dict:
    """Drop keys whose value is None."""
    return {k: v for k, v in doc.items() if v is not None}


def _thing(type_name: str, **fields: Any) -> dict:
    return _compact({"@type": type_name, **fields})


def _address(address: Optional[dict]) -> Optional[dict]:
    if not address:
        return None
    return _thing(
        "PostalAddress",
        streetAddress=address.get("streetAddress"),
        addressLocality=address.get("addressLocality"),
        addressRegion=address.get("addressRegion"),
        postalCode=address.get("postalCode"),
        addressCountry=address.get("addressCountry"),
    )


def build_product_document(product: dict) -> dict:
    """
    Build a Schema.org Product document from product input fields.

    Args:
        product: camelCase product fields (name, description, image, brand,
            price, priceCurrency, availability, sku, url, gtin, aggregateRating)
    """
    availability = product.get("availability")
    doc = _compact({
        "@context": SCHEMA_CONTEXT,
        "@type": "Product",
        "name": product.get("name"),
        "description": product.get("description"),
        "image": product.get("image"),
        "brand": _thing("Brand", name=product.get("brand")),
        "offers": _thing(
            "Offer",
            url=product.get("url"),
            priceCurrency=product.get("priceCurrency"),
            price=product.get("price"),
            availability=_schema_uri(availability) if availability else None,
        ),
        "sku": product.get("sku"),
    })

    if product.get("gtin"):
        doc["gtin"] = product["gtin"]

    rating = product.get("aggregateRating")
    if rating:
        doc["aggregateRating"] = {
            "@type": "AggregateRating",
            "ratingValue": rating["ratingValue"],
            "reviewCount": rating["reviewCount"],
            "bestRating": rating.get("bestRating") or 5,
            "worstRating": rating.get("worstRating") or 1,
        }

    return doc


def _product(record: dict) -> dict:
    data = dict(record.get("productData") or {})
    data.setdefault("name", record.get("name"))
    if data.get("description") is None:
        data["description"] = record.get("description")
    return build_product_document(data)


def _organization(record: dict) -> dict:
    data = record["organizationData"]
    contact = data.get("contactPoint")
    return _compact({
        "@context": SCHEMA_CONTEXT,
        "@type": "Organization",
        "name": data["name"],
        "url": data.get("url"),
        "logo": data.get("logo"),
        "description": data.get("description") or record.get("description"),
        "contactPoint": _thing(
            "ContactPoint",
            telephone=contact.get("telephone"),
            email=contact.get("email"),
            contactType=contact.get("contactType"),
        ) if contact else None,
        "address": _address(data.get("address")),
    })


def _article(record: dict) -> dict:
    data = record["articleData"]
    publisher = data.get("publisher")
    return _compact({
        "@context": SCHEMA_CONTEXT,
        "@type": "Article",
        "headline": data["headline"],
        "image": data.get("image"),
        "author": _thing("Person", name=data.get("author")),
        "datePublished": data.get("datePublished"),
        "dateModified": data.get("dateModified"),
        "publisher": _thing(
            "Organization",
            name=publisher.get("name"),
            logo=_thing("ImageObject", url=publisher["logo"]) if publisher.get("logo") else None,
        ) if publisher else None,
        "articleBody": data.get("articleBody"),
    })


def _local_business(record: dict) -> dict:
    data = record["businessData"]
    return _compact({
        "@context": SCHEMA_CONTEXT,
        "@type": "LocalBusiness",
        "name": data["name"],
        "image": data.get("image"),
        "telephone": data.get("telephone"),
        "email": data.get("email"),
        "address": _address(data.get("address")),
        "openingHours": data.get("openingHours"),
        "priceRange": data.get("priceRange"),
    })


def _website(record: dict) -> dict:
    data = record["websiteData"]
    action = data.get("potentialAction")
    search = None
    if action:
        search = _thing(
            "SearchAction",
            target=action["target"],
            **{"query-input": action.get("queryInput")},
        )
    return _compact({
        "@context": SCHEMA_CONTEXT,
        "@type": "WebSite",
        "name": data["name"],
        "url": data["url"],
        "description": data.get("description") or record.get("description"),
        "potentialAction": search,
    })


def _event(record: dict) -> dict:
    data = record["eventData"]
    location = data.get("location")
    status = data.get("eventStatus")
    return _compact({
        "@context": SCHEMA_CONTEXT,
        "@type": "Event",
        "name": data["name"],
        "startDate": data["startDate"],
        "endDate": data.get("endDate"),
        "location": _thing(
            "Place",
            name=location.get("name"),
            address=_address(location.get("address")),
        ) if location else None,
        "image": data.get("image"),
        "description": data.get("description") or record.get("description"),
        "eventStatus": _schema_uri(status) if status else None,
    })


def _person(record: dict) -> dict:
    data = record["personData"]
    works_for = data.get("worksFor")
    return _compact({
        "@context": SCHEMA_CONTEXT,
        "@type": "Person",
        "name": data["name"],
        "givenName": data.get("givenName"),
        "familyName": data.get("familyName"),
        "image": data.get("image"),
        "jobTitle": data.get("jobTitle"),
        "worksFor": _thing("Organization", name=works_for.get("name")) if works_for else None,
        "email": data.get("email"),
        "telephone": data.get("telephone"),
        "url": data.get("url"),
        "sameAs": data.get("sameAs") or None,
    })


def _recipe(record: dict) -> dict:
    data = record["recipeData"]
    nutrition = data.get("nutrition")
    return _compact({
        "@context": SCHEMA_CONTEXT,
        "@type": "Recipe",
        "name": data["name"],
        "image": data.get("image"),
        "description": data.get("description") or record.get("description"),
        "prepTime": data.get("prepTime"),
        "cookTime": data.get("cookTime"),
        "totalTime": data.get("totalTime"),
        "keywords": data.get("keywords"),
        "recipeYield": data.get("recipeYield"),
        "recipeCuisine": data.get("recipeCuisine"),
        "recipeCategory": data.get("recipeCategory"),
        "nutrition": _thing("NutritionInformation", **nutrition) if nutrition else None,
    })


def _review(record: dict) -> dict:
    data = record["reviewData"]
    rating = data["reviewRating"]
    return _compact({
        "@context": SCHEMA_CONTEXT,
        "@type": "Review",
        "itemReviewed": _thing("Thing", name=data["itemReviewed"]["name"]),
        "reviewRating": {
            "@type": "Rating",
            "ratingValue": rating["ratingValue"],
            "bestRating": rating.get("bestRating", 5),
            "worstRating": rating.get("worstRating", 1),
        },
        "author": _thing("Person", name=data["author"]["name"]),
        "reviewBody": data.get("reviewBody"),
        "datePublished": data.get("datePublished"),
    })


def _faq(record: dict) -> dict:
    return {
        "@context": SCHEMA_CONTEXT,
        "@type": "FAQPage",
        "mainEntity": [
            {
                "@type": "Question",
                "name": item["question"],
                "acceptedAnswer": {"@type": "Answer", "text": item["answer"]},
            }
            for item in record["faqData"]["questions"]
        ],
    }


_BUILDERS = {
    "product": _product,
    "organization": _organization,
    "article": _article,
    "localBusiness": _local_business,
    "website": _website,
    "event": _event,
    "person": _person,
    "recipe": _recipe,
    "review": _review,
    "FAQ": _faq,
}


def build_document(record: dict) -> dict:
    """Build the JSON-LD document for a stored record, dispatching on its type."""
    builder = _BUILDERS.get(record.get("type"))
    if builder is None:
        raise SchemaError(f"Unsupported schema type: {record.get('type')!r}")
    try:
        return builder(record)
    except (KeyError, TypeError, AttributeError, ValueError) as e:
        # untyped partial updates can leave a stored record without required parts
        raise SchemaError("Stored schema is incomplete and cannot be rendered") from e


def to_script_tag(document: dict) -> str:
    """Wrap a JSON-LD document in an embeddable <script> element."""
    body = json.dumps(document, indent=2, ensure_ascii=False, allow_nan=False)
    # "<" inside the element could close it or open a comment; \u003c is the same JSON string
    body = body.replace("<", "\\u003c")
    return f'<script type="application/ld+json">{body}</script>'
