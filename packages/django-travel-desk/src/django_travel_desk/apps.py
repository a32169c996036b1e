"""Django app configuration for django-travel-desk."""

from django.apps import AppConfig


class DjangoTravelDeskConfig(AppConfig):
    """App configuration for django-travel-desk."""

    name = 'django_travel_desk'
    verbose_name = 'Django Travel Desk'
    default_auto_field = 'django.db.models.BigAutoField'
