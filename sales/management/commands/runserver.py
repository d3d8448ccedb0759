from django.conf import settings
from django.contrib.staticfiles.management.commands.runserver import Command as RunserverCommand


class Command(RunserverCommand):
    """``runserver`` listening on the configured PORT by default."""

    default_port = str(settings.PORT)
