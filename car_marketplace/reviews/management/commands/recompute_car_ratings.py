from django.core.management.base import BaseCommand, CommandError
from car_marketplace.inventory.models import Car
from car_marketplace.reviews.exceptions import AggregationFailure
from car_marketplace.reviews.services.rating_aggregator import build_rating_aggregator


class Command(BaseCommand):
    help = (
        "Recompute the cached average rating and review count of cars from their "
        "active reviews. Repairs drift left by bulk imports or failed recomputes."
    )

    def add_arguments(self, parser):
        parser.add_argument('car_ids', nargs='*', type=int, help='IDs of the cars to recompute')
        parser.add_argument('--all', action='store_true', dest='all_cars', help='Recompute every car')

    def handle(self, *args, **options):
        car_ids = options['car_ids']
        if options['all_cars']:
            if car_ids:
                raise CommandError("Pass car IDs or --all, not both.")
            car_ids = list(Car.objects.order_by('pk').values_list('pk', flat=True))
        elif not car_ids:
            raise CommandError("Pass one or more car IDs, or --all.")

        aggregator = build_rating_aggregator()
        repaired = failed = 0
        for car_id in car_ids:
            try:
                aggregate = aggregator.recompute(car_id)
            except AggregationFailure as exc:
                failed += 1
                self.stderr.write(self.style.ERROR(str(exc)))
                continue
            if aggregate is None:
                self.stdout.write(self.style.WARNING(f"Car {car_id} not found, skipped"))
                continue
            repaired += 1
            self.stdout.write(self.style.SUCCESS(
                f"Car {car_id}: average_rating={aggregate.average_rating} review_count={aggregate.review_count}"
            ))

        self.stdout.write(f"Recomputed {repaired} car(s), {failed} failed")
