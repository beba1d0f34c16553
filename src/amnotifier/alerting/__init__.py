from amnotifier.alerting.alert import Alert, AlertDocument, AlertType

__all__ = ["Alert", "AlertDocument", "AlertType"]
