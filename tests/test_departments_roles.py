"""Department and Role service tests."""

import pytest

from db.database import transaction
from directory.departments import create_department, list_departments
from directory.errors import ConflictError, ValidationError
from directory.resolver import ReferenceKind, resolve
from directory.roles import create_role, list_roles


@pytest.mark.integration
class TestDepartments:
    def test_name_is_trimmed(self, engine):
        with transaction(engine) as con:
            row = create_department(con, "  Finance ")
        assert row["name"] == "Finance"

    @pytest.mark.parametrize("name", [None, "", "   "])
    def test_name_required(self, engine, name):
        with pytest.raises(ValidationError, match="name required"):
            with transaction(engine) as con:
                create_department(con, name)

    def test_duplicate_is_conflict(self, engine):
        with transaction(engine) as con:
            create_department(con, "Finance")
        with pytest.raises(ConflictError, match="Department name exists"):
            with transaction(engine) as con:
                create_department(con, "Finance")

    def test_explicit_and_resolved_rows_share_names(self, engine):
        with transaction(engine) as con:
            created = create_department(con, "Finance")
            assert resolve(con, ReferenceKind.DEPARTMENT, "Finance") == created["id"]

    def test_list_with_manager(self, engine, make_employee):
        boss = make_employee(first_name="Omar", last_name="Saeed")
        with transaction(engine) as con:
            create_department(con, "Production", manager_id=boss["id"])
            create_department(con, "Logistics")
            rows = list_departments(con)

        assert [r["name"] for r in rows] == ["Production", "Logistics"]
        assert rows[0]["manager_name"] == "Omar Saeed"
        assert rows[1]["manager_name"] is None


@pytest.mark.integration
class TestRoles:
    def test_default_permissions(self, engine):
        with transaction(engine) as con:
            row = create_role(con, "Viewer")
        assert row["permissions"] == {}

    def test_permissions_stored_as_given(self, engine):
        perms = {"scopes": ["employees:read"], "level": 2}
        with transaction(engine) as con:
            create_role(con, "Auditor", perms)
            rows = list_roles(con)
        assert rows[0]["permissions"] == perms

    def test_duplicate_is_conflict(self, engine):
        with transaction(engine) as con:
            create_role(con, "Viewer")
        with pytest.raises(ConflictError, match="Role exists"):
            with transaction(engine) as con:
                create_role(con, " Viewer ")

    def test_list_ordered_by_id(self, engine):
        with transaction(engine) as con:
            for name in ("Zeta", "Alpha", "Mid"):
                create_role(con, name)
            assert [r["name"] for r in list_roles(con)] == ["Zeta", "Alpha", "Mid"]
