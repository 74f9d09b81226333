"""
Schema record models: one pydantic model per Schema.org kind.

Field names are snake_case in Python and camelCase on the wire.
"""
import math
import re
from datetime import datetime
from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import (
    AfterValidator,
    AnyUrl,
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    PlainValidator,
    StrictBool,
    StrictInt,
    StringConstraints,
    TypeAdapter,
)
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError


class SchemaType(str, Enum):
    """Fixed set of supported record kinds."""
    PRODUCT = "product"
    ORGANIZATION = "organization"
    ARTICLE = "article"
    LOCAL_BUSINESS = "localBusiness"
    WEBSITE = "website"
    EVENT = "event"
    PERSON = "person"
    RECIPE = "recipe"
    REVIEW = "review"
    FAQ = "FAQ"


class Availability(str, Enum):
    IN_STOCK = "InStock"
    OUT_OF_STOCK = "OutOfStock"
    PRE_ORDER = "PreOrder"
    DISCONTINUED = "Discontinued"


class EventStatus(str, Enum):
    SCHEDULED = "EventScheduled"
    MOVED_ONLINE = "EventMovedOnline"
    POSTPONED = "EventPostponed"
    CANCELLED = "EventCancelled"


_URL_ADAPTER = TypeAdapter(AnyUrl)
_PHONE_RE = re.compile(r"\+?[0-9\s\-()]+", re.ASCII)
_PRICE_RE = re.compile(r"[0-9]+(\.[0-9]{1,2})?")
_DATETIME_RE = re.compile(
    r"[0-9]{4}-[0-9]{2}-[0-9]{2}T[0-9]{2}:[0-9]{2}:[0-9]{2}(\.[0-9]+)?(Z|[+-][0-9]{2}:[0-9]{2})"
)


def _check_url(value: str) -> str:
    try:
        _URL_ADAPTER.validate_python(value)
    except ValueError:
        raise PydanticCustomError("url", "Must be a valid URL")
    return value


def _check_phone(value: str) -> str:
    if not _PHONE_RE.fullmatch(value):
        raise PydanticCustomError("phone", "Invalid phone number")
    return value


def _check_price(value: str) -> str:
    if not _PRICE_RE.fullmatch(value):
        raise PydanticCustomError("price", "Invalid price format")
    return value


def _check_datetime(value: str) -> str:
    """Require an ISO-8601 date-time with seconds and an explicit zone."""
    if not _DATETIME_RE.fullmatch(value):
        raise PydanticCustomError("datetime", "Invalid ISO-8601 date-time")
    try:
        datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        raise PydanticCustomError("datetime", "Invalid ISO-8601 date-time")
    return value


def _check_number(value):
    # bool is an int subclass; JSON true/false must not pass as a rating
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise PydanticCustomError("number_type", "Expected number")
    if not math.isfinite(value):
        raise PydanticCustomError("number_finite", "Number must be finite")
    return value


def NumberIn(low: float, high: float):
    """Int or float within [low, high], returned unchanged."""
    def check(value):
        if not low <= value <= high:
            raise PydanticCustomError(
                "number_range",
                "Number must be between {low} and {high}",
                {"low": low, "high": high},
            )
        return value
    return Annotated[Union[int, float], PlainValidator(_check_number), AfterValidator(check)]


def Text(max_length: int, min_length: int = 0):
    """Trimmed string with a length ceiling."""
    return Annotated[str, StringConstraints(strip_whitespace=True, min_length=min_length, max_length=max_length)]


Url = Annotated[str, AfterValidator(_check_url)]
Phone = Annotated[str, AfterValidator(_check_phone)]
Price = Annotated[str, AfterValidator(_check_price)]
DateTime = Annotated[str, AfterValidator(_check_datetime)]
Number = Annotated[Union[int, float], PlainValidator(_check_number)]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PostalAddress(CamelModel):
    street_address: Text(500)
    address_locality: Text(200)
    address_region: Text(200)
    postal_code: Text(50)
    address_country: Text(200)


class ProductRating(CamelModel):
    rating_value: NumberIn(0, 5)
    review_count: Annotated[StrictInt, Field(ge=0)]
    best_rating: Optional[Number] = None
    worst_rating: Optional[Number] = None


class ProductData(CamelModel):
    name: Text(200, min_length=1)
    image: Optional[Url] = None
    description: Optional[Text(5000)] = None
    brand: Optional[Text(200)] = None
    sku: Optional[Text(100)] = None
    gtin: Optional[Text(50)] = None
    price: Optional[Price] = None
    price_currency: Annotated[str, StringConstraints(min_length=3, max_length=3)] = "USD"
    availability: Optional[Availability] = None
    url: Optional[Url] = None
    aggregate_rating: Optional[ProductRating] = None


class ContactPoint(CamelModel):
    telephone: Optional[Phone] = None
    email: Optional[EmailStr] = None
    contact_type: Optional[Text(100)] = None


class OrganizationData(CamelModel):
    name: Text(200, min_length=1)
    url: Optional[Url] = None
    logo: Optional[Url] = None
    description: Optional[Text(5000)] = None
    contact_point: Optional[ContactPoint] = None
    address: Optional[PostalAddress] = None


class Publisher(CamelModel):
    name: Text(200)
    logo: Optional[Url] = None


class ArticleData(CamelModel):
    headline: Text(200, min_length=1)
    image: Optional[Url] = None
    author: Text(200)
    date_published: Optional[DateTime] = None
    date_modified: Optional[DateTime] = None
    publisher: Optional[Publisher] = None
    article_body: Optional[Text(50000)] = None


class BusinessData(CamelModel):
    name: Text(200, min_length=1)
    image: Optional[Url] = None
    telephone: Optional[Phone] = None
    email: Optional[EmailStr] = None
    address: Optional[PostalAddress] = None
    opening_hours: Optional[Text(500)] = None
    price_range: Optional[Text(50)] = None


class SearchAction(CamelModel):
    target: Url
    query_input: Optional[Text(500)] = None


class WebsiteData(CamelModel):
    name: Text(200, min_length=1)
    url: Url
    description: Optional[Text(5000)] = None
    potential_action: Optional[SearchAction] = None


class EventLocation(CamelModel):
    name: Text(200)
    address: PostalAddress


class EventData(CamelModel):
    name: Text(200, min_length=1)
    start_date: DateTime
    end_date: Optional[DateTime] = None
    location: Optional[EventLocation] = None
    image: Optional[Url] = None
    description: Optional[Text(5000)] = None
    event_status: Optional[EventStatus] = None


class NamedThing(CamelModel):
    name: Text(200)


class RequiredName(CamelModel):
    name: Text(200, min_length=1)


class PersonData(CamelModel):
    name: Text(200, min_length=1)
    given_name: Optional[Text(200)] = None
    family_name: Optional[Text(200)] = None
    image: Optional[Url] = None
    job_title: Optional[Text(200)] = None
    works_for: Optional[NamedThing] = None
    email: Optional[EmailStr] = None
    telephone: Optional[Phone] = None
    url: Optional[Url] = None
    same_as: Optional[list[Url]] = None


class Nutrition(CamelModel):
    calories: Optional[Text(100)] = None
    fat_content: Optional[Text(100)] = None
    carbohydrate_content: Optional[Text(100)] = None
    protein_content: Optional[Text(100)] = None


class RecipeData(CamelModel):
    name: Text(200, min_length=1)
    image: Optional[Url] = None
    description: Optional[Text(5000)] = None
    prep_time: Optional[Text(100)] = None
    cook_time: Optional[Text(100)] = None
    total_time: Optional[Text(100)] = None
    keywords: Optional[Text(500)] = None
    recipe_yield: Optional[Text(100)] = None
    recipe_cuisine: Optional[Text(200)] = None
    recipe_category: Optional[Text(200)] = None
    nutrition: Optional[Nutrition] = None


class ReviewRating(CamelModel):
    rating_value: NumberIn(1, 5)
    best_rating: Number = 5
    worst_rating: Number = 1


class ReviewData(CamelModel):
    item_reviewed: RequiredName
    review_rating: ReviewRating
    author: RequiredName
    review_body: Optional[Text(5000)] = None
    date_published: Optional[DateTime] = None


class Question(CamelModel):
    question: Text(500, min_length=1)
    answer: Text(5000, min_length=1)


class FaqData(CamelModel):
    questions: Annotated[list[Question], Field(min_length=1)]


class BaseRecord(CamelModel):
    """Fields shared by every record kind."""
    name: Text(200)
    description: Optional[Text(1000)] = None
    dynamic: StrictBool = False


class ProductRecord(BaseRecord):
    type: Literal["product"]
    product_data: ProductData


class OrganizationRecord(BaseRecord):
    type: Literal["organization"]
    organization_data: OrganizationData


class ArticleRecord(BaseRecord):
    type: Literal["article"]
    article_data: ArticleData


class LocalBusinessRecord(BaseRecord):
    type: Literal["localBusiness"]
    business_data: BusinessData


class WebsiteRecord(BaseRecord):
    type: Literal["website"]
    website_data: WebsiteData


class EventRecord(BaseRecord):
    type: Literal["event"]
    event_data: EventData


class PersonRecord(BaseRecord):
    type: Literal["person"]
    person_data: PersonData


class RecipeRecord(BaseRecord):
    type: Literal["recipe"]
    recipe_data: RecipeData


class ReviewRecord(BaseRecord):
    type: Literal["review"]
    review_data: ReviewData


class FaqRecord(BaseRecord):
    type: Literal["FAQ"]
    faq_data: FaqData


RECORD_MODELS: dict[str, type[BaseRecord]] = {
    SchemaType.PRODUCT.value: ProductRecord,
    SchemaType.ORGANIZATION.value: OrganizationRecord,
    SchemaType.ARTICLE.value: ArticleRecord,
    SchemaType.LOCAL_BUSINESS.value: LocalBusinessRecord,
    SchemaType.WEBSITE.value: WebsiteRecord,
    SchemaType.EVENT.value: EventRecord,
    SchemaType.PERSON.value: PersonRecord,
    SchemaType.RECIPE.value: RecipeRecord,
    SchemaType.REVIEW.value: ReviewRecord,
    SchemaType.FAQ.value: FaqRecord,
}
