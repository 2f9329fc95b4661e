from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class HtmlFormConfig(AppConfig):
    name = "formentry.htmlform"
    verbose_name = _("HTML Form Entry")
