"""
Read-only statistics over users, garments and try-on requests.

Nothing here is cached; every call queries the database again. All
operations return zeros or empty lists on an empty database.
"""

import logging
from datetime import timedelta

from django.contrib.auth import get_user_model
from django.db.models import Avg, Count, Q
from django.db.models.functions import TruncDate
from django.utils import timezone

from garments.models import Garment
from tryon.models import TryonRequest
from tryon_backend.choices import TryOnStatus, UserRole

logger = logging.getLogger(__name__)

User = get_user_model()

COMPLETED = Q(status=TryOnStatus.COMPLETED)
FAILED = Q(status=TryOnStatus.FAILED)


def success_rate(completed, total):
    """Percentage rounded to two decimals; 0 when there is nothing to rate."""
    if not total:
        return 0
    return round(completed / total * 100, 2)


def _day_start(now):
    local = timezone.localtime(now)
    return local.replace(hour=0, minute=0, second=0, microsecond=0)


class AnalyticsAggregator:
    def system_snapshot(self, now=None):
        now = now or timezone.now()
        today = _day_start(now)
        month = today.replace(day=1)

        users = User.objects.filter(role=UserRole.USER).aggregate(
            total=Count('id'),
            today=Count('id', filter=Q(created_at__gte=today)),
            month=Count('id', filter=Q(created_at__gte=month)),
        )
        garments = Garment.objects.aggregate(
            total=Count('id'),
            active=Count('id', filter=Q(is_active=True)),
        )
        tryons = TryonRequest.objects.aggregate(
            total=Count('id'),
            today=Count('id', filter=Q(created_at__gte=today)),
            month=Count('id', filter=Q(created_at__gte=month)),
            successful=Count('id', filter=COMPLETED),
            failed=Count('id', filter=FAILED),
        )
        avg_time = TryonRequest.objects.filter(
            COMPLETED,
            processing_time__isnull=False,
        ).aggregate(avg=Avg('processing_time'))['avg']

        return {
            'users': users,
            'garments': garments,
            'tryOns': {
                **tryons,
                'successRate': success_rate(tryons['successful'], tryons['total']),
                'avgProcessingTime': round(avg_time) if avg_time is not None else 0,
            },
        }

    def popular_garments(self, limit=5):
        """Garments with the most try-on requests of any status; ties by id."""
        garments = (
            Garment.objects.annotate(try_on_count=Count('tryon_requests'))
            .filter(try_on_count__gt=0)
            .order_by('-try_on_count', 'id')[:limit]
        )
        return [
            {
                'id': g.pk,
                'name': g.name,
                'category': g.category,
                'imageUrl': g.image_url,
                'tryOnCount': g.try_on_count,
            }
            for g in garments
        ]

    def daily_trend(self, days=7, now=None):
        """
        Per-day totals for the trailing window, oldest first.

        Days are calendar days in the current time zone; days without any
        request are left out.
        """
        now = now or timezone.now()
        start = _day_start(now) - timedelta(days=days)
        rows = (
            TryonRequest.objects.filter(created_at__gte=start)
            .annotate(day=TruncDate('created_at', tzinfo=timezone.get_current_timezone()))
            .values('day')
            .annotate(
                total=Count('id'),
                successful=Count('id', filter=COMPLETED),
                failed=Count('id', filter=FAILED),
            )
            .order_by('day')
        )
        return [
            {
                'date': row['day'].isoformat(),
                'total': row['total'],
                'successful': row['successful'],
                'failed': row['failed'],
            }
            for row in rows
        ]

    def category_distribution(self):
        rows = (
            Garment.objects.active()
            .values('category')
            .annotate(count=Count('id'))
            .order_by('-count', 'category')
        )
        return [{'category': row['category'], 'count': row['count']} for row in rows]

    def user_activity(self, user):
        """Try-on totals for one account."""
        stats = TryonRequest.objects.filter(user=user).aggregate(
            total=Count('id'),
            completed=Count('id', filter=COMPLETED),
            failed=Count('id', filter=FAILED),
        )
        last = TryonRequest.objects.filter(user=user).order_by('-created_at', '-id').values_list(
            'created_at', flat=True
        ).first()
        return {
            **stats,
            'successRate': success_rate(stats['completed'], stats['total']),
            'favorites': user.favorites.count(),
            'lastTryOnAt': last.isoformat() if last else None,
        }

    def dashboard(self):
        overview = self.system_snapshot()
        logger.debug("Analytics snapshot computed: %s", overview)
        return {
            'overview': overview,
            'popularGarments': self.popular_garments(),
            'dailyTrend': self.daily_trend(),
            'categoryDistribution': self.category_distribution(),
        }
