import logging

from django.core.management.base import BaseCommand

from waste.models import RewardCatalogEntry

logger = logging.getLogger(__name__)

DEFAULT_REWARDS = [
    {
        'name': 'Reusable Shopping Bag',
        'cost': 50,
        'description': 'A sturdy cotton bag to replace single-use plastic.',
        'collection_info': 'Pick up at any partner recycling centre.',
    },
    {
        'name': 'Steel Water Bottle',
        'cost': 150,
        'description': 'Insulated bottle for a plastic-free commute.',
        'collection_info': 'Shipped to the email address on your account.',
    },
    {
        'name': 'Tree Planting Certificate',
        'cost': 300,
        'description': 'A tree planted in your name by a local partner.',
        'collection_info': 'Certificate sent by email within a week.',
    },
]


class Command(BaseCommand):
    help = 'Create the default reward catalog entries (existing entries are left untouched).'

    def handle(self, *args, **options):
        created_count = 0
        for data in DEFAULT_REWARDS:
            defaults = {k: v for k, v in data.items() if k != 'name'}
            _, created = RewardCatalogEntry.objects.get_or_create(name=data['name'], defaults=defaults)
            if created:
                created_count += 1
                logger.info("Seeded reward '%s'", data['name'])

        self.stdout.write(self.style.SUCCESS(f"Seeded {created_count} new reward(s)."))
