from django.apps import AppConfig


class TagRulesConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'tag_rules'
    verbose_name = 'Tag Rules'
