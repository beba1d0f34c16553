"""Tests for alert payload construction."""

from datetime import datetime, timedelta, timezone

from amnotifier.alerting.alert import Alert
from amnotifier.alertmanager.config import Config
from amnotifier.alertmanager.payload import AlertmanagerAlert, build_alert, format_timestamp
from amnotifier.alertmanager.provider import AlertProvider
from amnotifier.endpoint.models import Endpoint, Result


class TestBuildAlert:
    """Tests for build_alert."""

    def test_firing_alert(self, provider, endpoint, alert, failing_result):
        cfg = provider.get_config(endpoint.group, alert)
        firing = build_alert(cfg, endpoint, alert, failing_result, False)

        assert firing.labels["alertname"] == "GatusEndpointDown"
        assert firing.labels["instance"] == endpoint.url
        assert firing.labels["job"] == "gatus"
        assert firing.labels["endpoint"] == endpoint.name
        assert firing.labels["group"] == endpoint.group
        assert firing.labels["severity"] == "warning"
        assert firing.labels["environment"] == "test"
        assert firing.annotations["runbook"] == "https://wiki.example.com/runbook"
        assert firing.annotations["summary"] == "Endpoint Test API is down"
        assert firing.annotations["alert_description"] == "API health check failed"
        assert firing.ends_at is None
        assert not firing.is_resolved

    def test_resolved_alert(self, provider, endpoint, alert, failing_result):
        cfg = provider.get_config(endpoint.group, alert)
        before = datetime.now(timezone.utc)
        resolved = build_alert(cfg, endpoint, alert, failing_result, True)

        assert resolved.ends_at is not None
        assert resolved.ends_at >= before - timedelta(minutes=1)
        assert resolved.ends_at == resolved.starts_at
        assert resolved.is_resolved
        assert resolved.annotations["summary"] == "Endpoint Test API is now healthy"
        assert resolved.annotations["description"] == (
            "Endpoint Test API (https://api.example.com/health) has recovered "
            "and is now passing health checks"
        )
        assert resolved.annotations["alert_description"] == "API health check failed"

    def test_resolved_ignores_errors(self, endpoint):
        cfg = Config(url="u", default_severity="critical")
        resolved = build_alert(cfg, endpoint, Alert(), Result(errors=["boom"]), True)
        assert "Errors" not in resolved.annotations["description"]

    def test_errors_joined(self, endpoint):
        cfg = Config(url="u", default_severity="critical")
        result = Result(errors=["timeout", "dns fail"])

        firing = build_alert(cfg, endpoint, Alert(), result, False)

        assert firing.annotations["description"].endswith("Errors: timeout, dns fail")
        assert firing.annotations["description"] == (
            "Endpoint Test API (https://api.example.com/health) has failed health checks. "
            "Errors: timeout, dns fail"
        )

    def test_no_group_label_without_group(self):
        cfg = Config(url="u", default_severity="critical")
        firing = build_alert(cfg, Endpoint(name="db", url="tcp://db:5432"), Alert(), Result(), False)
        assert "group" not in firing.labels

    def test_no_alert_description(self, endpoint):
        cfg = Config(url="u", default_severity="critical")
        firing = build_alert(cfg, endpoint, Alert(description=""), Result(), False)
        assert "alert_description" not in firing.annotations

    def test_extra_labels_overwrite_fixed_labels(self, endpoint):
        cfg = Config(
            url="u",
            default_severity="critical",
            extra_labels={"alertname": "Custom", "job": "blackbox"},
            extra_annotations={"summary": "custom summary"},
        )
        firing = build_alert(cfg, endpoint, Alert(), Result(), False)

        assert firing.labels["alertname"] == "Custom"
        assert firing.labels["job"] == "blackbox"
        assert firing.annotations["summary"] == "custom summary"

    def test_end_to_end_scenario(self):
        provider = AlertProvider(default_config=Config(url="http://am:9093"))
        endpoint = Endpoint(name="API", url="https://api/health", group="prod")
        alert = Alert()

        cfg = provider.get_config(endpoint.group, alert)
        firing = build_alert(cfg, endpoint, alert, Result(errors=[]), False)

        assert firing.labels == {
            "alertname": "GatusEndpointDown",
            "instance": "https://api/health",
            "job": "gatus",
            "severity": "critical",
            "endpoint": "API",
            "group": "prod",
        }
        assert firing.annotations == {
            "summary": "Endpoint API is down",
            "description": "Endpoint API (https://api/health) has failed health checks",
        }

    def test_does_not_share_config_maps(self, endpoint):
        cfg = Config(url="u", default_severity="critical", extra_labels={"team": "platform"})
        firing = build_alert(cfg, endpoint, Alert(), Result(), False)
        firing.labels["team"] = "changed"
        assert cfg.extra_labels == {"team": "platform"}


class TestAlertmanagerAlert:
    """Tests for the wire representation."""

    def test_to_dict_firing_omits_ends_at(self):
        starts = datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)
        payload = AlertmanagerAlert(labels={"a": "1"}, annotations={"b": "2"}, starts_at=starts)

        assert payload.to_dict() == {
            "labels": {"a": "1"},
            "annotations": {"b": "2"},
            "startsAt": "2024-05-01T12:30:00Z",
        }

    def test_to_dict_resolved(self):
        now = datetime(2024, 5, 1, 12, 30, 15, 250000, tzinfo=timezone.utc)
        payload = AlertmanagerAlert(labels={}, annotations={}, starts_at=now, ends_at=now)
        data = payload.to_dict()

        assert data["startsAt"] == "2024-05-01T12:30:15.250000Z"
        assert data["endsAt"] == data["startsAt"]

    def test_format_timestamp_non_utc(self):
        value = datetime(2024, 5, 1, 14, 30, tzinfo=timezone(timedelta(hours=2)))
        assert format_timestamp(value) == "2024-05-01T14:30:00+02:00"
