"""Tests de los servicios hoja: bases de datos y contenedores."""

import pytest

from arc.core import aaa, msg
from arc.core.errors import ConfigError
from arc.mock import Record, cloud


class TestDatabaseService:
    def test_create_service_and_databases(self, call):
        assert call("db", "create") == 0
        writes = [c for c in cloud.writes() if c[0] == "create"]
        assert writes == [("create", "db_subnet_group", "database_service"), ("create", "database", "orders")]
        record = cloud.get("database", "orders")
        assert record.data["engine"] == "postgres"
        assert record.data["instance_type"] == "db.t3.micro"
        assert "Database created: " + record.id in aaa.accounting_buffer()

    def test_destroy_in_reverse_order(self, call):
        assert call("db", "create") == 0
        cloud.calls.clear()
        assert call("database", "destroy") == 0
        assert [c for c in cloud.writes()] == [
            ("destroy", "database", "orders"),
            ("destroy", "db_subnet_group", "database_service"),
        ]

    def test_named_database(self, call, capsys):
        assert call("db", "orders", "create") == 0
        assert cloud.get("db_subnet_group", "database_service") is None
        assert call("db", "orders", "create") == 0
        assert "Database exists, skipping..." in capsys.readouterr().out

    def test_provision_restores_configured_type(self, call):
        assert call("db", "orders", "create") == 0
        cloud.get("database", "orders").data["instance_type"] = "db.t3.large"
        assert call("db", "orders", "provision") == 0
        assert cloud.get("database", "orders").data["instance_type"] == "db.t3.micro"

    def test_provision_missing_database_is_skipped(self, call, capsys):
        assert call("db", "orders", "update") == 0
        assert "Database does not exist, skipping..." in capsys.readouterr().out
        assert cloud.writes() == []

    def test_unknown_database(self, call):
        assert call("db", "nope", "create") == 1
        assert any("Unknown database 'nope'" in e for e in msg.last_errors())

    def test_audit(self, call):
        assert call("db", "create") == 0
        cloud.get("database", "orders").data["instance_type"] = "db.t3.large"
        cloud.put("database", "legacy", Record(id="db-legacy"))

        assert call("db", "audit") == 0
        audit = aaa.get_audit("Database")
        assert audit.buffers[aaa.AuditKind.DEPLOYED] == ["legacy, db-legacy"]
        assert audit.buffers[aaa.AuditKind.MISMATCHED] == [
            "Database 'orders' | Configured Type: 'db.t3.micro' - Deployed Type: 'db.t3.large'"
        ]

    def test_duplicate_database(self, make_arc, document):
        databases = document["database_service"]["databases"]
        databases.append(dict(databases[0]))
        with pytest.raises(ConfigError, match="must be unique"):
            make_arc(document)

    def test_missing_provider(self, make_arc, document):
        del document["database_service"]["provider"]
        with pytest.raises(ConfigError, match="provider element is missing"):
            make_arc(document)

    def test_unknown_vendor(self, make_arc, document):
        document["database_service"]["provider"] = {"vendor": "nimbus"}
        with pytest.raises(ConfigError, match="Unknown vendor 'nimbus'"):
            make_arc(document)

    def test_not_configured(self, make_arc, document):
        del document["database_service"]
        assert make_arc(document).run(["db", "create"]) == 1
        assert any("DatabaseService not defined" in e for e in msg.last_errors())


class TestContainerService:
    def test_uses_root_provider(self, arc):
        assert arc.container_service.cfg.provider.vendor == "mock"

    def test_create_and_destroy(self, call, capsys):
        assert call("container", "create") == 0
        assert cloud.get("container_service", "ecs1").state == "active"
        assert "Container Service created: ecs1" in aaa.accounting_buffer()

        assert call("container", "destroy") == 0
        assert cloud.get("container_service", "ecs1") is None
        assert call("container", "destroy") == 0
        assert "Container Service does not exist, skipping..." in capsys.readouterr().out

    def test_provision_applies_data(self, make_arc, document):
        document["container_service"]["data"] = {"capacity": "2"}
        arc = make_arc(document)
        assert arc.run(["container", "create"]) == 0
        cloud.get("container_service", "ecs1").data["capacity"] = "1"
        assert arc.run(["container", "provision"]) == 0
        assert cloud.get("container_service", "ecs1").data["capacity"] == "2"

    def test_audit_reports_missing_service(self, call):
        assert call("container", "audit") == 0
        assert aaa.get_audit("ContainerService").buffers[aaa.AuditKind.CONFIGURED] == ["ecs1"]

    def test_no_provider_anywhere(self, make_arc, document):
        del document["provider"]
        with pytest.raises(ConfigError, match="provider element is missing"):
            make_arc(document)

    def test_path_after_service_fails(self, call):
        assert call("container", "ecs1", "create") == 1
