def test_add_existing_user_requires_creator_and_email(client):
    resp = client.post("/functions/v1/add-existing-user-to-store", json={"email": "a@example.com"})
    assert resp.status_code == 400
    assert resp.json() == {"success": False, "message": "Missing required data"}


def test_add_existing_user_success(client, monkeypatch):
    monkeypatch.setattr("storefront.stores.service.repository.find_user_by_email", lambda email: {"id": "u1"})
    monkeypatch.setattr("storefront.stores.service.repository.find_store_user", lambda user_id, creator_id: None)
    monkeypatch.setattr("storefront.stores.service.repository.insert_store_user", lambda user_id, creator_id: [{"id": "su-1"}])

    resp = client.post("/functions/v1/add-existing-user-to-store", json={"creatorId": "c1", "email": "a@example.com"})
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "message": "User added to contacts successfully", "storeUser": [{"id": "su-1"}]}


def test_add_existing_user_uses_service_role_client(client, mock_db_dependency):
    # Client Supabase simulé: aucun utilisateur -> invitation
    table = mock_db_dependency.table.return_value
    table.select.return_value.eq.return_value.limit.return_value.execute.return_value.data = []
    table.insert.return_value.execute.return_value.data = [{"id": "inv-1"}]

    resp = client.post("/functions/v1/add-existing-user-to-store", json={"creatorId": "c1", "email": "new@example.com"})
    assert resp.status_code == 200
    assert resp.json()["invitation"] == [{"id": "inv-1"}]
    mock_db_dependency.table.assert_any_call("store_invitations")
