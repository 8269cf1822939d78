"""Random guest data for load tests."""

from faker import Faker

from sweap.schemas import Guest, InvitationState


def generate_guests(
    event_id: str,
    count: int,
    *,
    seed: int | None = None,
    locale: str = "en_US",
) -> list[Guest]:
    """Create ``count`` guests with random names for an event.

    The guests carry no id; the API assigns one on creation.

    Args:
        event_id: Event the guests belong to
        count: Number of guests
        seed: Seed for reproducible names
        locale: Faker locale for the names

    Returns:
        List of unsaved guests
    """
    fake = Faker(locale)
    if seed is not None:
        fake.seed_instance(seed)

    return [
        Guest(
            event_id=event_id,
            first_name=fake.first_name(),
            last_name=fake.last_name(),
            invitation_state=InvitationState.NONE,
        )
        for _ in range(count)
    ]
