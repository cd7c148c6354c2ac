"""Event category catalog.

The fixed category / sub-category taxonomy events are filed under.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class SubCategory:
    id: str
    name: str


@dataclass(frozen=True)
class Category:
    """A top-level category and its sub-categories."""
    id: str
    name: str
    sub_categories: tuple[SubCategory, ...]


def _category(category_id: str, name: str, *subs: tuple[str, str]) -> Category:
    return Category(
        id=category_id,
        name=name,
        sub_categories=tuple(SubCategory(id=s, name=n) for s, n in subs),
    )


CATEGORIES: tuple[Category, ...] = (
    _category(
        "sports-fitness", "Sports & Fitness",
        ("football", "Football"),
        ("basketball", "Basketball"),
        ("volleyball", "Volleyball"),
        ("running", "Running"),
        ("hiking", "Hiking"),
        ("cycling", "Cycling"),
        ("gym-workout", "Gym Workout"),
        ("tennis", "Tennis"),
        ("martial-arts", "Martial Arts"),
    ),
    _category(
        "games-activities", "Games & Activities",
        ("board-games", "Board Games"),
        ("card-games", "Card Games"),
        ("video-games", "Video Games"),
        ("escape-room", "Escape Room"),
        ("quiz-night", "Quiz Night"),
        ("karaoke", "Karaoke"),
    ),
    _category(
        "social-meetups", "Social Meetups",
        ("casual-chat", "Casual Chat"),
        ("meal-together", "Meal Together"),
        ("park-hangout", "Park Hangout"),
        ("book-club", "Book Club"),
        ("deep-conversation", "Deep Conversation"),
    ),
    _category(
        "arts-culture", "Arts & Culture",
        ("concert", "Concert"),
        ("cinema", "Cinema"),
        ("theatre", "Theatre"),
        ("art-exhibition", "Art Exhibition"),
        ("photography-walk", "Photography Walk"),
        ("creative-workshop", "Creative Workshop"),
    ),
    _category(
        "nightlife", "Nightlife",
        ("bar-night", "Bar Night"),
        ("clubbing", "Clubbing"),
        ("live-music", "Live Music"),
        ("meyhane-night", "Meyhane Night"),
        ("raki-fish", "Rakı and Fish"),
    ),
    _category(
        "food-events", "Food Events",
        ("street-food-tour", "Street Food Tour"),
        ("new-restaurant-tryout", "New Restaurant Tryout"),
        ("cooking-together", "Cooking Together"),
        ("bbq", "BBQ"),
        ("traditional-breakfast", "Traditional Breakfast"),
    ),
    _category(
        "learning-growth", "Learning & Growth",
        ("language-exchange", "Language Exchange"),
        ("study-group", "Study Group"),
        ("book-discussion", "Book Discussion"),
        ("guest-talk", "Guest Talk"),
        ("skill-sharing", "Skill-sharing"),
    ),
    _category(
        "outdoors-nature", "Outdoors & Nature",
        ("camping", "Camping"),
        ("picnic", "Picnic"),
        ("beach-day", "Beach Day"),
        ("nature-walk", "Nature Walk"),
        ("fishing", "Fishing"),
        ("horseback-riding", "Horseback Riding"),
    ),
    _category(
        "wellness", "Wellness",
        ("yoga", "Yoga"),
        ("meditation", "Meditation"),
        ("mental-health-support", "Mental Health Support"),
        ("wellness-walk", "Wellness Walk"),
        ("spa-day", "Spa Day"),
    ),
    _category(
        "family-kids", "Family & Kids",
        ("playdate", "Playdate"),
        ("kid-event", "Kid Event"),
        ("storytime", "Storytime"),
        ("parent-meetup", "Parent Meetup"),
        ("family-picnic", "Family Picnic"),
    ),
    _category(
        "hobbies-interests", "Hobbies & Interests",
        ("pet-meetup", "Pet Meetup"),
        ("photography", "Photography"),
        ("car-enthusiasts", "Car Enthusiasts"),
        ("cosplay", "Cosplay"),
        ("dance", "Dance"),
        ("crafts", "Crafts"),
    ),
    _category(
        "professional-networking", "Professional & Networking",
        ("startup-meetup", "Startup Meetup"),
        ("industry-networking", "Industry Networking"),
        ("coworking", "Coworking"),
        ("freelancer-meetup", "Freelancer Meetup"),
        ("tech-talk", "Tech Talk"),
    ),
)

UNCATEGORIZED = "Uncategorized"


def get_category(category_id: str) -> Category | None:
    """Look up a category by ID."""
    for category in CATEGORIES:
        if category.id == category_id:
            return category
    return None


def get_sub_category(category_id: str, sub_category_id: str) -> SubCategory | None:
    """Look up a sub-category within a category."""
    category = get_category(category_id)
    if category is None:
        return None
    for sub in category.sub_categories:
        if sub.id == sub_category_id:
            return sub
    return None


def category_name(category_id: str | None) -> str:
    """Display name of a category, "Uncategorized" if unknown."""
    category = get_category(category_id) if category_id else None
    return category.name if category else UNCATEGORIZED


def sub_category_name(category_id: str | None, sub_category_id: str | None) -> str:
    """Display name of a sub-category, "Uncategorized" if unknown."""
    if not category_id or not sub_category_id:
        return UNCATEGORIZED
    sub = get_sub_category(category_id, sub_category_id)
    return sub.name if sub else UNCATEGORIZED
