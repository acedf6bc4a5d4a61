from utils.admins import ensure_admin

from conftest import login, register


def test_admin_guardians_requires_login(client):
    assert client.get('/api/admin/guardians').status_code == 401


def test_admin_guardians_forbidden_for_guardian(guardian_client):
    resp = guardian_client.get('/api/admin/guardians')
    assert resp.status_code == 403
    assert resp.get_json()["message"] == "Acceso prohibido: requiere permisos de administrador"


def test_admin_lists_guardians_without_credentials(app, client):
    register(client)
    register(client, email="otro@example.com")
    with app.app_context():
        ensure_admin("admin@example.com", "admin-clave", name="Directora")
    assert login(client, "admin@example.com", "admin-clave").status_code == 200

    resp = client.get('/api/admin/guardians')
    assert resp.status_code == 200
    guardians = resp.get_json()
    assert {g["email"] for g in guardians} == {"maria@example.com", "otro@example.com", "admin@example.com"}
    for g in guardians:
        assert "password" not in g
        assert "password_hash" not in g


def test_ensure_admin_promotes_existing_guardian(app, client):
    register(client)
    with app.app_context():
        guardian, created = ensure_admin("maria@example.com", "nueva-clave")
        assert created is False
        assert guardian.role == "admin"
    assert login(client, "maria@example.com", "nueva-clave").status_code == 200
    assert client.get('/api/admin/guardians').status_code == 200


def test_create_admin_command_reports_short_password(app):
    runner = app.test_cli_runner()
    result = runner.invoke(args=["create-admin", "--email", "admin@example.com", "--password", "123"])
    assert result.exit_code == 1
    assert "Could not create admin" in result.output


def test_create_admin_command_creates_account(app, client):
    runner = app.test_cli_runner()
    result = runner.invoke(args=["create-admin", "--email", "admin@example.com", "--password", "admin-clave"])
    assert result.exit_code == 0
    assert "Created admin: admin@example.com" in result.output
    assert login(client, "admin@example.com", "admin-clave").status_code == 200
