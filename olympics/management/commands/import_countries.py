from django.core.management.base import BaseCommand
from django_countries import countries

from olympics.models import Country

DEFAULT_FLAG_URL_TEMPLATE = "https://flagcdn.com/{alpha2}.svg"


class Command(BaseCommand):
    help = "Populate the Country table from the django-countries registry using alpha-3 codes."

    def add_arguments(self, parser):
        parser.add_argument(
            "--only",
            nargs="+",
            metavar="CODE",
            help="Restrict the import to these alpha-2 or alpha-3 codes",
        )
        parser.add_argument(
            "--flag-url-template",
            default=DEFAULT_FLAG_URL_TEMPLATE,
            help="Format string receiving {alpha2} and {alpha3} in lower case",
        )
        parser.add_argument(
            "--update",
            action="store_true",
            help="Overwrite the name and flag of countries that already exist",
        )

    def handle(self, *args, **options):
        wanted = {code.upper() for code in options["only"] or []}
        template = options["flag_url_template"]
        created = updated = skipped = 0

        for alpha2, name in countries:
            alpha3 = countries.alpha3(alpha2)
            if wanted and alpha2 not in wanted and alpha3 not in wanted:
                continue
            if not alpha3:
                self.stderr.write(f"No alpha-3 code for {name} ({alpha2}), skipping.")
                skipped += 1
                continue

            values = {
                "name": str(name),
                "flag_url": template.format(alpha2=alpha2.lower(), alpha3=alpha3.lower()),
            }
            country, was_created = Country.objects.get_or_create(code=alpha3, defaults=values)
            if was_created:
                created += 1
            elif options["update"]:
                for field, value in values.items():
                    setattr(country, field, value)
                country.save(update_fields=list(values))
                updated += 1
            else:
                skipped += 1

        self.stdout.write(
            self.style.SUCCESS(f"Imported countries: {created} created, {updated} updated, {skipped} skipped.")
        )
