# flatbot/formatter.py
from .state import Filters, Listing
from .utils import format_price


def format_listing_card(listing: Listing) -> str:
    price = format_price(listing.price_value) if listing.price_value else "ціна не вказана"
    lines = [
        f"🏠 {listing.title or 'Оголошення'}",
        f"📍 {listing.location or 'локація не вказана'}",
        f"💰 {price}",
        f"🔗 {listing.url or ''}",
    ]
    return "\n".join(lines)


def format_summary(f: Filters) -> str:
    """Filters recap shown before the search is launched."""
    districts = ", ".join(f.districts) if f.districts else "будь-які"
    price = f"до {f.price_max} zł" if f.price_max else "без ліміту"
    rooms = ", ".join(r.value for r in f.rooms) if f.rooms else "будь-які"
    pets = f.pets or "все одно"
    parking = ", ".join(f.parking) if f.parking else "неважливо"
    elevator = "Так" if f.elevator is True else "Все одно"

    return (
        "Окей, я зловила твій вайб ✨\n\n"
        f"📍 Райони: {districts}\n"
        f"💰 Бюджет: {price}\n"
        f"🚪 Кімнати: {rooms}\n"
        f"🐕 Тварини: {pets}\n"
        f"🚗 Паркінг: {parking}\n"
        f"🛗 Ліфт: {elevator}\n\n"
        "Запускаю пошук?"
    )
