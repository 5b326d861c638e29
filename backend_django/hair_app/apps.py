from django.apps import AppConfig


class HairAppConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'hair_app'
    verbose_name = 'Hairalyzer'
