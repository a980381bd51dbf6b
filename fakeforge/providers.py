"""
Value Providers — one Faker-backed generator per semantic type tag.

Each provider takes a Faker instance and returns a single value.
Numeric tags return native numbers and `boolean` returns a bool so
JSON output keeps its types.
"""

from datetime import date, datetime

from faker import Faker


DEPARTMENTS = [
    "Engineering", "Marketing", "Sales", "Finance", "Human Resources",
    "Operations", "Customer Support", "Legal", "Research", "Product",
]

SKILLS = [
    "Python", "JavaScript", "Go", "SQL", "Kubernetes", "Docker", "AWS",
    "Machine Learning", "React", "Data Analysis", "Project Management",
    "Communication", "Rust", "Terraform", "Excel",
]

PRODUCT_NOUNS = [
    "Widget", "Gadget", "Speaker", "Lamp", "Backpack", "Keyboard",
    "Monitor", "Bottle", "Chair", "Headphones", "Charger", "Notebook",
]

BRAND_SUFFIXES = ["ify", "ly", "io", "Labs", "Works", "Co", "Hub"]

STATUSES = ["active", "inactive", "pending", "completed", "cancelled", "suspended"]

PRIORITIES = ["low", "medium", "high", "critical"]

GENDERS = ["Male", "Female", "Non-binary", "Prefer not to say"]

CATEGORIES = [
    "Electronics", "Clothing", "Books", "Home", "Sports", "Toys",
    "Health", "Automotive", "Garden", "Food",
]

DATE_START = date(1990, 1, 1)
DATETIME_START = datetime(2020, 1, 1)


def _product(fake: Faker) -> str:
    return f"{fake.word().capitalize()} {fake.random_element(PRODUCT_NOUNS)}"


def _brand(fake: Faker) -> str:
    return f"{fake.word().capitalize()}{fake.random_element(BRAND_SUFFIXES)}"


def _duration(fake: Faker) -> str:
    minutes = fake.random_int(1, 600)
    hours, minutes = divmod(minutes, 60)
    return f"{hours}h {minutes}m" if hours else f"{minutes}m"


def _version(fake: Faker) -> str:
    return f"{fake.random_int(0, 9)}.{fake.random_int(0, 20)}.{fake.random_int(0, 50)}"


PROVIDERS = {
    # Identity
    "email": lambda fake: fake.email(),
    "name": lambda fake: fake.name(),
    "firstname": lambda fake: fake.first_name(),
    "lastname": lambda fake: fake.last_name(),
    "username": lambda fake: fake.user_name(),
    "uuid": lambda fake: fake.uuid4(),
    "gender": lambda fake: fake.random_element(GENDERS),
    "age": lambda fake: fake.random_int(18, 80),
    # Contact
    "phone": lambda fake: fake.phone_number(),
    "address": lambda fake: fake.street_address(),
    "city": lambda fake: fake.city(),
    "state": lambda fake: fake.state_abbr(),
    "zipcode": lambda fake: fake.zipcode(),
    "country": lambda fake: fake.country(),
    # Business
    "company": lambda fake: fake.company(),
    "jobtitle": lambda fake: fake.job(),
    "department": lambda fake: fake.random_element(DEPARTMENTS),
    "category": lambda fake: fake.random_element(CATEGORIES),
    "price": lambda fake: round(fake.random.uniform(0, 1000), 2),
    "product": _product,
    "brand": _brand,
    "skill": lambda fake: fake.random_element(SKILLS),
    "status": lambda fake: fake.random_element(STATUSES),
    "priority": lambda fake: fake.random_element(PRIORITIES),
    # Technical
    "url": lambda fake: fake.url(),
    "image": lambda fake: fake.image_url(),
    "ipaddress": lambda fake: fake.ipv4(),
    "macaddress": lambda fake: fake.mac_address(),
    "version": _version,
    "filename": lambda fake: fake.file_name(),
    "duration": _duration,
    # Security
    "password": lambda fake: fake.password(length=12),
    "creditcard": lambda fake: fake.credit_card_number(),
    "bankaccount": lambda fake: fake.bban(),
    "ssn": lambda fake: fake.ssn(),
    "license": lambda fake: fake.bothify("??-#######").upper(),
    # Content
    "text": lambda fake: fake.paragraph(nb_sentences=3),
    "hashtag": lambda fake: f"#{fake.word()}",
    "color": lambda fake: fake.color_name(),
    # Measurements
    "longitude": lambda fake: float(fake.longitude()),
    "latitude": lambda fake: float(fake.latitude()),
    "temperature": lambda fake: round(fake.random.uniform(-20, 45), 1),
    "weight": lambda fake: round(fake.random.uniform(2, 150), 1),
    "height": lambda fake: round(fake.random.uniform(50, 210), 1),
    # Primitives
    "date": lambda fake: fake.date_between(start_date=DATE_START, end_date="today").isoformat(),
    "datetime": lambda fake: fake.date_time_between(
        start_date=DATETIME_START, end_date="now"
    ).strftime("%Y-%m-%d %H:%M:%S"),
    "boolean": lambda fake: fake.boolean(),
    "int": lambda fake: fake.random_int(1, 1000),
    "float": lambda fake: fake.random.uniform(0, 1000),
}

# Declared-type spellings that resolve to a catalog tag
ALIASES = {
    "integer": "int",
    "serial": "int",
    "bool": "boolean",
    "timestamp": "datetime",
    "decimal": "float",
    "numeric": "float",
    "zip": "zipcode",
    "varchar": "string",
}

SEMANTIC_TYPES = frozenset(PROVIDERS) | {"string"}


def contextual_string(fake: Faker, field_name: str) -> str:
    """Guess a plausible string from the field name, defaulting to a person name."""
    name = field_name.lower()
    if "title" in name:
        return fake.job()
    if "department" in name:
        return fake.random_element(DEPARTMENTS)
    if "skill" in name or "technology" in name:
        return fake.random_element(SKILLS)
    if "color" in name:
        return fake.color_name()
    if "product" in name:
        return _product(fake)
    if "brand" in name:
        return _brand(fake)
    return fake.name()


def normalize_tag(tag: str) -> str:
    tag = (tag or "").lower()
    return ALIASES.get(tag, tag)


def get_provider(tag: str):
    """Provider for `tag`; unknown tags fall back to the name provider."""
    return PROVIDERS.get(normalize_tag(tag), PROVIDERS["name"])


def generate_value(tag: str, fake: Faker, field_name: str = ""):
    """Produce one value of semantic type `tag`."""
    if normalize_tag(tag) == "string":
        return contextual_string(fake, field_name)
    return get_provider(tag)(fake)
