def test_health_check(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_unknown_role_is_treated_as_missing_contract(client, gateway, store, contract):
    base = "/api/repositories/mihai/test/contracts/john"
    invoice_id = store.invoices_of(contract)[0].id

    assert client.put(f"{base}/restore", params={"role": "CEO"}).status_code == 204
    assert client.put(f"{base}/invoices/{invoice_id}/pay", params={"role": "CEO"}).status_code == 204
    assert client.get(f"{base}/invoices", params={"role": "CEO"}).json() == []
    assert gateway.calls == []
