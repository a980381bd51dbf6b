"""
Field Type Inference Engine.

Maps a field's name and declared type onto one semantic type tag using a
layered fallback (declared type → exact name → substring → semantic synonym
→ regex → suffix/prefix → default), then generates a value for that tag.

Every table below is an ordered sequence. The first match wins, so
precedence between overlapping patterns is the order they are listed in.
"""

import logging
import re
import threading

from faker import Faker

from fakeforge.providers import SEMANTIC_TYPES, generate_value, normalize_tag


logger = logging.getLogger(__name__)


# Stage names reported by `infer_with_stage`
DECLARED = "declared"
EXACT = "exact"
SUBSTRING = "substring"
SEMANTIC = "semantic"
REGEX = "regex"
CONTEXTUAL = "contextual"
DEFAULT = "default"
REMOTE = "remote"


NAME_PATTERNS = (
    ("email", (
        "email", "e_mail", "email_address", "e_mail_address",
        "contact_email", "user_email", "customer_email", "work_email",
    )),
    ("name", (
        "name", "full_name", "fullname", "display_name", "user_name",
        "customer_name", "client_name", "person_name", "contact_name",
    )),
    ("firstname", (
        "first_name", "firstname", "fname", "given_name", "forename",
        "first", "christian_name",
    )),
    ("lastname", (
        "last_name", "lastname", "lname", "surname", "family_name",
        "last", "sur_name",
    )),
    ("phone", (
        "phone", "phone_number", "phonenumber", "mobile", "mobile_number",
        "cell", "cell_phone", "telephone", "contact_number", "contact_phone",
        "work_phone", "home_phone", "fax", "fax_number",
    )),
    ("address", (
        "address", "street_address", "street", "address_line", "addr",
        "home_address", "work_address", "mailing_address", "shipping_address",
        "billing_address", "physical_address",
    )),
    ("city", (
        "city", "town", "municipality", "locality", "place", "city_name",
        "hometown", "residence_city",
    )),
    ("state", (
        "state", "province", "region", "territory", "state_code",
        "province_code", "state_name", "province_name",
    )),
    ("zipcode", (
        "zip", "zipcode", "zip_code", "postal_code", "postcode",
        "postal", "zip_postal", "post_code",
    )),
    ("country", (
        "country", "country_name", "country_code", "nation", "nationality",
        "country_iso", "country_alpha", "homeland",
    )),
    ("company", (
        "company", "company_name", "organization", "org", "business",
        "corporation", "corp", "firm", "enterprise", "employer",
        "organization_name", "business_name",
    )),
    ("uuid", (
        "uuid", "guid", "id", "identifier", "unique_id", "key",
        "primary_key", "ref_id", "reference_id", "external_id",
    )),
    ("date", (
        "date", "created_date", "updated_date", "birth_date", "birthdate",
        "start_date", "end_date", "due_date", "expiry_date", "expiration_date",
        "registration_date", "join_date", "hired_date",
    )),
    ("datetime", (
        "datetime", "timestamp", "created_at", "updated_at", "modified_at",
        "last_login", "last_seen", "login_time", "access_time", "event_time",
        "created_on", "updated_on", "processed_at",
    )),
    ("price", (
        "price", "cost", "amount", "fee", "charge", "rate", "salary",
        "wage", "payment", "total", "subtotal", "tax", "discount",
        "revenue", "income", "expense", "budget", "balance",
    )),
    ("boolean", (
        "active", "enabled", "disabled", "verified", "confirmed", "approved",
        "published", "deleted", "archived", "featured", "premium", "paid",
        "completed", "finished", "closed", "open", "available", "visible",
        "public", "private", "is_active", "is_enabled", "is_deleted",
    )),
    ("text", (
        "description", "bio", "biography", "summary", "notes", "comments",
        "details", "content", "body", "message", "review", "feedback",
        "about", "info", "information", "remarks", "observations",
    )),
    ("url", (
        "url", "website", "link", "homepage", "site", "web_address",
        "web_url", "site_url", "profile_url", "image_url", "avatar_url",
    )),
    ("image", (
        "image", "photo", "picture", "avatar", "thumbnail", "logo",
        "banner", "icon", "profile_image", "profile_picture", "img",
    )),
    ("age", (
        "age", "years_old", "birth_year", "year_of_birth", "age_years",
    )),
    # jobtitle precedes gender so "title" is a job title, not a salutation
    ("jobtitle", (
        "job_title", "job", "position", "role", "occupation", "profession",
        "title", "job_position", "work_title", "career", "designation",
    )),
    ("gender", (
        "gender", "sex", "mr_mrs", "salutation",
    )),
    ("department", (
        "department", "dept", "division", "team", "unit", "section",
        "department_name", "work_department", "business_unit",
    )),
    ("skill", (
        "skill", "skills", "technology", "technologies", "expertise",
        "competency", "competencies", "capability", "abilities", "talent",
    )),
    ("color", (
        "color", "colour", "hue", "shade", "tint", "pigment",
        "primary_color", "background_color", "text_color",
    )),
    ("product", (
        "product", "product_name", "item", "item_name", "merchandise",
        "goods", "article", "commodity", "sku", "model",
    )),
    ("brand", (
        "brand", "brand_name", "manufacturer", "make", "label",
        "trademark", "vendor", "supplier", "producer",
    )),
    ("username", (
        "username", "user_name", "login", "handle", "nickname", "nick",
        "screen_name", "display_name", "alias", "login_name",
    )),
    ("password", (
        "password", "passwd", "pass", "pwd", "secret", "pin",
        "passcode", "access_code", "security_code",
    )),
    ("ipaddress", (
        "ip", "ip_address", "ipv4", "ipv6", "host", "server_ip",
        "client_ip", "remote_ip", "local_ip", "network_address",
    )),
    ("macaddress", (
        "mac", "mac_address", "hardware_address", "physical_address",
        "ethernet_address", "wifi_mac", "device_mac",
    )),
    ("creditcard", (
        "credit_card", "creditcard", "card_number", "cc_number",
        "payment_card", "debit_card", "card", "cc",
    )),
    ("bankaccount", (
        "bank_account", "routing_number", "account_number",
        "iban", "swift", "bic", "sort_code", "account_no",
    )),
    ("ssn", (
        "ssn", "social_security", "social_security_number", "tax_id",
        "national_id", "personal_id", "citizen_id",
    )),
    ("license", (
        "license", "licence", "license_number", "permit", "certificate",
        "registration", "license_plate", "driver_license",
    )),
    ("version", (
        "version", "ver", "release", "build", "revision", "v",
        "software_version", "app_version", "api_version",
    )),
    ("status", (
        "status", "state", "condition", "stage", "phase", "mode",
        "current_status", "order_status", "payment_status",
    )),
    ("priority", (
        "priority", "importance", "urgency", "level", "rank", "grade",
        "priority_level", "severity", "criticality",
    )),
    ("duration", (
        "duration", "length", "time", "period", "interval", "span",
        "elapsed_time", "runtime", "execution_time",
    )),
    ("filename", (
        "file", "filename", "file_name", "document", "attachment",
        "upload", "media", "resource", "asset", "path",
    )),
    ("hashtag", (
        "hashtag", "tag", "tags", "keyword", "keywords", "label",
        "category_tag", "search_tag", "topic",
    )),
    ("longitude", (
        "longitude", "lng", "lon", "long", "x_coordinate", "east_west",
    )),
    ("latitude", (
        "latitude", "lat", "y_coordinate", "north_south",
    )),
    ("temperature", (
        "temperature", "temp", "celsius", "fahrenheit", "kelvin",
        "degrees", "thermal", "heat",
    )),
    ("weight", (
        "weight", "mass", "kg", "kilogram", "pound", "lb", "gram",
        "ounce", "ton", "stone",
    )),
    ("height", (
        "height", "tall", "stature", "elevation", "altitude", "length",
        "inches", "feet", "cm", "centimeter", "meter",
    )),
    ("category", (
        "category", "type", "kind", "classification", "group", "class",
        "tag", "label", "status", "role", "department", "division",
    )),
)

SEMANTIC_SYNONYMS = (
    # Business entities
    ("customer", "name"),
    ("user", "name"),
    ("client", "name"),
    ("employee", "name"),
    ("person", "name"),
    ("contact", "name"),
    ("vendor", "company"),
    ("supplier", "company"),
    ("manufacturer", "company"),
    ("brand", "company"),
    # Time
    ("created", "datetime"),
    ("updated", "datetime"),
    ("modified", "datetime"),
    ("deleted", "datetime"),
    ("published", "datetime"),
    ("expired", "datetime"),
    ("started", "datetime"),
    ("finished", "datetime"),
    ("birth", "date"),
    ("hire", "date"),
    ("join", "date"),
    # Financial
    ("salary", "price"),
    ("wage", "price"),
    ("cost", "price"),
    ("fee", "price"),
    ("amount", "price"),
    ("total", "price"),
    ("balance", "price"),
    ("budget", "price"),
    # Contact
    ("mobile", "phone"),
    ("tel", "phone"),
    ("telephone", "phone"),
    ("cell", "phone"),
)

REGEX_PATTERNS = (
    ("email", re.compile(r"^.*e?mail.*$")),
    ("phone", re.compile(r"^.*(phone|tel|mobile|cell|contact).*$")),
    ("date", re.compile(r"^.*(date|day|month|year).*$")),
    ("datetime", re.compile(r"^.*(timestamp|datetime|time|at|on).*$")),
    ("price", re.compile(r"^.*(price|cost|amount|fee|salary|wage|budget|total).*$")),
    ("boolean", re.compile(r"^(is_|has_|can_|should_|will_|was_).*$")),
    ("url", re.compile(r"^.*(url|link|site|web|http).*$")),
    ("image", re.compile(r"^.*(image|img|photo|picture|avatar|thumbnail).*$")),
    ("uuid", re.compile(r"^.*(id|key|uuid|guid)$")),
)

SUFFIXES = (
    ("_id", "uuid"),
    ("_key", "uuid"),
    ("_at", "datetime"),
    ("_on", "datetime"),
    ("_date", "date"),
    ("_time", "datetime"),
    ("_url", "url"),
    ("_link", "url"),
    ("_email", "email"),
    ("_phone", "phone"),
    ("_address", "address"),
    ("_city", "city"),
    ("_state", "state"),
    ("_zip", "zipcode"),
    ("_country", "country"),
    ("_price", "price"),
    ("_cost", "price"),
    ("_amount", "price"),
    ("_total", "price"),
    ("_count", "int"),
    ("_number", "int"),
    ("_age", "age"),
    ("_year", "int"),
    ("_status", "category"),
    ("_type", "category"),
    ("_category", "category"),
    ("_description", "text"),
    ("_bio", "text"),
    ("_notes", "text"),
    ("_comments", "text"),
)

PREFIXES = (
    ("is_", "boolean"),
    ("has_", "boolean"),
    ("can_", "boolean"),
    ("should_", "boolean"),
    ("will_", "boolean"),
    ("was_", "boolean"),
    ("user_", "name"),
    ("customer_", "name"),
    ("client_", "name"),
    ("contact_", "phone"),
    ("home_", "address"),
    ("work_", "address"),
    ("billing_", "address"),
    ("shipping_", "address"),
)

SINGLE_WORDS = {
    "name": "name",
    "title": "string",
    "description": "text",
    "content": "text",
    "message": "text",
    "comment": "text",
    "note": "text",
    "summary": "text",
    "bio": "text",
    "about": "text",
    "details": "text",
    "info": "text",
    "data": "text",
    "value": "string",
    "code": "string",
    "key": "uuid",
    "token": "uuid",
    "hash": "string",
    "slug": "string",
    "tag": "string",
    "label": "string",
    "status": "category",
    "role": "category",
    "level": "int",
    "rank": "int",
    "order": "int",
    "position": "int",
    "index": "int",
    "count": "int",
    "quantity": "int",
    "size": "int",
    "weight": "float",
    "height": "float",
    "width": "float",
    "length": "float",
    "score": "float",
    "rating": "float",
    "percentage": "float",
    "ratio": "float",
}

# (lower bound, upper bound) when a constraint leaves one unset
NUMERIC_DEFAULTS = {
    "int": (1, 1000),
    "age": (18, 80),
    "float": (0, 1000),
    "price": (0, 1000),
}


def map_declared_type(declared: str) -> str:
    """
    Map a declared SQL/informal type onto a tag.

    Generic textual types return "" so that name-based inference decides.
    """
    sql_type = (declared or "").upper()

    if "SERIAL" in sql_type or "AUTO_INCREMENT" in sql_type:
        return "int"
    if "INT" in sql_type:  # INT, INTEGER, BIGINT, SMALLINT
        return "int"
    if "VARCHAR" in sql_type or "TEXT" in sql_type or "CHAR" in sql_type:
        return ""
    if sql_type == "STRING":
        return ""
    if any(t in sql_type for t in ("DECIMAL", "NUMERIC", "FLOAT", "DOUBLE")):
        return "float"
    if "BOOL" in sql_type:
        return "boolean"
    if "DATE" in sql_type and "TIME" not in sql_type:
        return "date"
    if "TIMESTAMP" in sql_type or "DATETIME" in sql_type:
        return "datetime"
    if "UUID" in sql_type or "GUID" in sql_type:
        return "uuid"
    if "JSON" in sql_type:
        return "text"
    if "BINARY" in sql_type or "BLOB" in sql_type:
        return "string"
    return ""


class FieldTypeInference:
    """
    Classifies fields into semantic tags and generates values for them.

    Args:
        fake: Faker instance used for value generation.
        cache: optional mapping shared across calls, keyed by
            (lowercased field name, declared type), plus the lowercased
            table name when a classifier is enabled. Owned by the caller.
        classifier: optional remote FieldClassifier consulted only when
            local inference falls through to the default stage.
        confidence_threshold: minimum remote confidence to accept a reply.
    """

    def __init__(self, fake: Faker = None, cache: dict = None, classifier=None,
                 confidence_threshold: float = 0.7):
        self.fake = fake or Faker()
        self.cache = cache
        self.classifier = classifier
        self.confidence_threshold = confidence_threshold
        self._cache_lock = threading.Lock()

    # ------------------------------------------------------------------
    # Classification
    # ------------------------------------------------------------------

    def infer(self, field, table_name: str = "") -> str:
        """Return the semantic tag for `field`."""
        return self.infer_with_stage(field, table_name)[0]

    def infer_with_stage(self, field, table_name: str = "") -> tuple:
        """Return (tag, stage) where stage names the rule that matched."""
        cache_key = (field.name.lower(), field.type)
        # remote answers depend on the table name
        if self._remote_enabled():
            cache_key += (table_name.lower(),)
        if self.cache is not None:
            with self._cache_lock:
                cached = self.cache.get(cache_key)
            if cached is not None:
                return cached

        result = self._infer_local(field.name, field.type)
        if result[1] == DEFAULT and self._remote_enabled():
            result = self._infer_remote(field, table_name, result)

        if self.cache is not None:
            with self._cache_lock:
                self.cache[cache_key] = result
        return result

    def _infer_local(self, name: str, declared: str) -> tuple:
        field_name = name.lower()

        tag = map_declared_type(declared)
        if tag:
            return tag, DECLARED

        for tag, patterns in NAME_PATTERNS:
            if field_name in patterns:
                return tag, EXACT

        for tag, patterns in NAME_PATTERNS:
            for pattern in patterns:
                if pattern in field_name:
                    return tag, SUBSTRING

        for fragment, tag in SEMANTIC_SYNONYMS:
            if fragment in field_name:
                return tag, SEMANTIC

        tag = self._regex_match(field_name)
        if tag:
            return tag, REGEX

        tag = self._contextual_match(field_name)
        if tag:
            return tag, CONTEXTUAL

        return self._default_inference(field_name, (declared or "").lower()), DEFAULT

    @staticmethod
    def _regex_match(field_name: str) -> str:
        for tag, pattern in REGEX_PATTERNS:
            if pattern.match(field_name):
                return tag
        return ""

    @staticmethod
    def _contextual_match(field_name: str) -> str:
        for suffix, tag in SUFFIXES:
            if field_name.endswith(suffix):
                return tag
        for prefix, tag in PREFIXES:
            if field_name.startswith(prefix):
                return tag
        return ""

    @staticmethod
    def _default_inference(field_name: str, declared: str) -> str:
        if len(field_name) <= 3:
            return "uuid" if "id" in field_name else "string"

        if field_name in SINGLE_WORDS:
            return SINGLE_WORDS[field_name]

        if declared and declared != "string":
            return declared
        return "string"

    def _remote_enabled(self) -> bool:
        return self.classifier is not None and self.classifier.enabled

    def _infer_remote(self, field, table_name: str, local: tuple) -> tuple:
        result = self.classifier.classify(field, table_name=table_name)
        if result.error:
            logger.debug("Remote classifier skipped for %s: %s", field.name, result.error)
            return local

        tag = normalize_tag(result.tag)
        if tag not in SEMANTIC_TYPES:
            logger.debug("Remote classifier returned unknown type %r for %s", result.tag, field.name)
            return local
        if result.confidence < self.confidence_threshold:
            logger.debug(
                "Remote classifier confidence %.2f below %.2f for %s",
                result.confidence, self.confidence_threshold, field.name,
            )
            return local

        logger.debug("Remote classifier: %s -> %s (%.2f)", field.name, tag, result.confidence)
        return tag, REMOTE

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------

    def generate(self, tag: str, field):
        """Generate one value of `tag`, honoring numeric bounds on `field`."""
        tag = normalize_tag(tag)
        constraints = field.constraints

        if tag in NUMERIC_DEFAULTS:
            low, high = NUMERIC_DEFAULTS[tag]
            if constraints is not None:
                if constraints.min_value is not None:
                    low = constraints.min_value
                if constraints.max_value is not None:
                    high = constraints.max_value
            if low > high:
                low, high = high, low

            if tag in ("int", "age"):
                return self.fake.random_int(low, high)
            value = self.fake.random.uniform(low, high)
            return round(value, 2) if tag == "price" else value

        return generate_value(tag, self.fake, field.name)

    def generate_value(self, field, table_name: str = ""):
        """Infer the field's tag and generate one value for it."""
        return self.generate(self.infer(field, table_name), field)
