# waste/utils/impact.py
"""Community impact figures and the points leaderboard, derived from reports and the ledger."""

import logging
import re

from django.db import DatabaseError
from django.db.models import Case, F, IntegerField, Q, Sum, Value, When
from django.db.models.functions import Coalesce

from ..models import Report, Transaction, User

logger = logging.getLogger(__name__)

# kg of CO2 offset per kg of waste collected
CO2_PER_KG = 0.5
IMPACT_SAMPLE_SIZE = 100

_NUMBER_RE = re.compile(r'(\d+(\.\d+)?)')


def parse_amount(amount):
    """First number in a free-text amount ("2.5 kg" -> 2.5), 0 when there is none."""
    match = _NUMBER_RE.search(amount or '')
    return float(match.group(0)) if match else 0.0


def impact_stats():
    empty = {'waste_collected': 0, 'reports_submitted': 0, 'tokens_earned': 0, 'co2_offset': 0}
    try:
        amounts = list(
            Report.objects.order_by('-created_at').values_list('amount', flat=True)[:IMPACT_SAMPLE_SIZE]
        )
        tokens_earned = Transaction.objects.filter(
            type__in=[Transaction.Type.EARNED_REPORT, Transaction.Type.EARNED_COLLECT]
        ).aggregate(total=Sum('amount'))['total'] or 0
    except DatabaseError:
        logger.exception("Error fetching impact data")
        return empty

    waste_collected = sum(parse_amount(amount) for amount in amounts)
    return {
        'waste_collected': round(waste_collected, 1),
        'reports_submitted': len(amounts),
        'tokens_earned': tokens_earned,
        'co2_offset': round(waste_collected * CO2_PER_KG, 1),
    }


def leaderboard(limit=20):
    """Users ranked by ledger balance; users who never earned anything are left out."""
    earned_filter = Q(transactions__type__startswith='earned')
    signed = Case(
        When(earned_filter, then=F('transactions__amount')),
        When(transactions__type=Transaction.Type.REDEEMED, then=-F('transactions__amount')),
        default=Value(0),
        output_field=IntegerField(),
    )
    try:
        users = User.objects.annotate(
            earned=Coalesce(Sum('transactions__amount', filter=earned_filter), Value(0), output_field=IntegerField()),
            points=Coalesce(Sum(signed), Value(0), output_field=IntegerField()),
        ).filter(earned__gt=0).order_by('-points', 'id')[:limit]
        return [
            {
                'user_id': user.pk,
                'name': user.display_name or user.username,
                'points': max(user.points, 0),
            }
            for user in users
        ]
    except DatabaseError:
        logger.exception("Error building leaderboard")
        return []
