"""
Integration tests for the operator endpoints: job listing, cancellation,
cleanup, bulk provisioning and tenant lifecycle (deactivate, redeploy,
deployment info, domain verification). All of them require the
X-Admin-API-Key header.
"""

import asyncio

import pytest

from src.domain.entities import TenantStatus
from tests.utils.provisioning import load_tenant, load_tenant_data, wait_for_progress


async def provision_and_wait(client, orchestrator, payload):
    response = await client.post("/deployment/provision", json=payload)
    assert response.status_code == 202, response.text
    job_id = response.json()["jobId"]
    return await orchestrator.wait(job_id, timeout=10)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "method, path",
    [
        ("GET", "/deployment/jobs"),
        ("POST", "/deployment/jobs/job_1/cancel"),
        ("POST", "/deployment/bulk-provision"),
        ("POST", "/admin/deployments/cleanup"),
        ("POST", "/admin/tenants/00000000-0000-0000-0000-000000000000/deactivate"),
        ("GET", "/admin/tenants/00000000-0000-0000-0000-000000000000/deployment"),
        ("POST", "/admin/domains/verify"),
    ],
)
async def test_admin_key_required(client, method, path):
    missing = await client.request(method, path)
    wrong = await client.request(method, path, headers={"X-Admin-API-Key": "nope"})

    assert missing.status_code == 401
    assert missing.json()["error"]["code"] == "UNAUTHORIZED"
    assert wrong.status_code == 401
    assert wrong.json()["error"]["code"] == "INVALID_API_KEY"


@pytest.mark.asyncio
async def test_list_jobs(client, orchestrator, admin_headers, test_data):
    done = await provision_and_wait(client, orchestrator, test_data.get("acme_request"))

    response = await client.get("/deployment/jobs", headers=admin_headers)
    completed = await client.get(
        "/deployment/jobs", params={"status": "completed"}, headers=admin_headers
    )
    failed = await client.get(
        "/deployment/jobs", params={"status": "failed"}, headers=admin_headers
    )

    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 1
    assert body["jobs"][0]["jobId"] == done.job_id
    assert body["jobs"][0]["subdomain"] == "acme"
    assert "apiKey" not in body["jobs"][0]
    assert completed.json()["total"] == 1
    assert failed.json()["total"] == 0


@pytest.mark.asyncio
async def test_cancel_running_job(client, orchestrator, session_factory, hosting, admin_headers, test_data):
    hosting.gate = asyncio.Event()
    response = await client.post("/deployment/provision", json=test_data.get("acme_request"))
    job_id = response.json()["jobId"]
    await wait_for_progress(orchestrator.job_store, job_id, 75)

    response = await client.post(f"/deployment/jobs/{job_id}/cancel", headers=admin_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "failed"
    assert body["failureReason"] == "CANCELLED"
    assert body["progress"] == 75
    assert hosting.deployed == []
    assert not orchestrator.is_running(job_id)

    # Applied steps stay applied
    tenant = await load_tenant(session_factory, "acme")
    assert tenant.status == TenantStatus.provisioning

    again = await client.post(f"/deployment/jobs/{job_id}/cancel", headers=admin_headers)
    assert again.status_code == 409
    assert again.json()["error"]["code"] == "JOB_ALREADY_FINISHED"


@pytest.mark.asyncio
async def test_cancel_unknown_job(client, admin_headers):
    response = await client.post("/deployment/jobs/job_missing/cancel", headers=admin_headers)

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_cleanup_keeps_recent_jobs(client, orchestrator, admin_headers, test_data):
    await provision_and_wait(client, orchestrator, test_data.get("acme_request"))

    response = await client.post("/admin/deployments/cleanup", headers=admin_headers)

    assert response.status_code == 200
    assert response.json() == {
        "removed": 0,
        "remaining": 1,
        "message": "Deployment cleanup completed",
    }


@pytest.mark.asyncio
async def test_bulk_provision(client, orchestrator, admin_headers, test_data):
    response = await client.post(
        "/deployment/bulk-provision",
        json={"tenants": test_data.get("bulk_requests")},
        headers=admin_headers,
    )

    assert response.status_code == 202
    body = response.json()
    assert body["accepted"] == 2
    assert body["rejected"] == 1
    rejected = body["results"][2]
    assert rejected["subdomain"] == "-bad-"
    assert rejected["errorCode"] == "VALIDATION_ERROR"

    jobs = await asyncio.gather(
        *(orchestrator.wait(item["jobId"], timeout=10) for item in body["results"][:2])
    )
    assert [job.status for job in jobs] == ["completed", "completed"]


@pytest.mark.asyncio
async def test_bulk_provision_limit(client, admin_headers, test_data):
    tenant = test_data.get("acme_request")
    tenants = [dict(tenant, subdomain=f"tenant{i}") for i in range(11)]

    response = await client.post(
        "/deployment/bulk-provision", json={"tenants": tenants}, headers=admin_headers
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "TOO_MANY_TENANTS"


# ---------------------------------------------------------------------------
# Tenant lifecycle
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_deactivate_then_redeploy(
    client, orchestrator, session_factory, hosting, admin_headers, test_data
):
    await provision_and_wait(client, orchestrator, test_data.get("acme_request"))
    tenant = await load_tenant(session_factory, "acme")

    response = await client.post(f"/admin/tenants/{tenant.id}/deactivate", headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["status"] == "inactive"
    assert (await load_tenant(session_factory, "acme")).status == TenantStatus.inactive

    response = await client.post(
        f"/admin/tenants/{tenant.id}/redeploy",
        json={"templateName": "minimal-blog"},
        headers=admin_headers,
    )

    assert response.status_code == 202
    body = response.json()
    assert body["tenantId"] == str(tenant.id)
    assert body["message"] == "Tenant redeployment started"

    job = await orchestrator.wait(body["jobId"], timeout=10)
    assert job.kind == "redeploy"
    assert job.status == "completed"
    assert job.api_key is None
    assert job.steps[-1].message == "Tenant reactivated at https://acme.fake-host.test"

    tenant = await load_tenant(session_factory, "acme")
    assert tenant.status == TenantStatus.active
    assert tenant.deactivated_at is None
    assert hosting.deployed == ["acme", "acme"]

    data = await load_tenant_data(session_factory, tenant)
    assert len(data["api_keys"]) == 1
    assert [e.action for e in data["audit_events"]][0] == "tenant_redeployed"


@pytest.mark.asyncio
async def test_redeploy_after_dns_failure_finishes_provisioning(
    client, orchestrator, session_factory, dns, email, admin_headers, test_data
):
    """
    Redeploying a tenant whose first run failed completes provisioning:
    the requested custom domain is claimed, an API key is issued and the
    welcome email goes out.
    """
    dns.fail = ConnectionError("DNS API unreachable")
    failed = await provision_and_wait(
        client, orchestrator, test_data.get("acme_custom_domain_request")
    )
    assert failed.failure_reason == "DNS_PROVIDER_UNAVAILABLE"

    tenant = await load_tenant(session_factory, "acme")
    assert tenant.custom_domain is None
    assert tenant.requested_custom_domain == "blog.acme.com"

    dns.fail = None
    response = await client.post(f"/admin/tenants/{tenant.id}/redeploy", headers=admin_headers)

    assert response.status_code == 202
    assert response.json()["message"] == "Tenant provisioning resumed"

    job = await orchestrator.wait(response.json()["jobId"], timeout=10)
    assert job.kind == "resume"
    assert job.status == "completed"
    assert job.api_key.startswith("fb_")
    assert job.steps[-1].message == "Deployment finalized successfully"

    tenant = await load_tenant(session_factory, "acme")
    assert tenant.status == TenantStatus.active
    assert tenant.provisioned_at is not None
    assert tenant.custom_domain == "blog.acme.com"
    assert dns.records["blog.acme.com"].content == "acme.fake-host.test"
    assert len(email.sent) == 1

    data = await load_tenant_data(session_factory, tenant)
    assert len(data["api_keys"]) == 1
    assert len(data["categories"]) == 3
    assert data["audit_events"][0].action == "tenant_provisioned"


@pytest.mark.asyncio
async def test_redeploy_unknown_tenant(client, admin_headers):
    response = await client.post(
        "/admin/tenants/00000000-0000-0000-0000-000000000000/redeploy", headers=admin_headers
    )

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "TENANT_NOT_FOUND"


@pytest.mark.asyncio
async def test_tenant_deployment_info(
    client, orchestrator, session_factory, admin_headers, test_data
):
    await provision_and_wait(client, orchestrator, test_data.get("acme_custom_domain_request"))
    tenant = await load_tenant(session_factory, "acme")

    response = await client.get(f"/admin/tenants/{tenant.id}/deployment", headers=admin_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["tenantId"] == str(tenant.id)
    assert body["subdomain"] == "acme"
    assert body["status"] == "active"
    assert body["customDomain"] == "blog.acme.com"
    assert body["domainConfigured"] is True
    assert body["domainVerified"] is False
    assert body["deploymentUrl"] == "https://acme.fake-host.test"
    assert body["deploymentProvider"] == "fake-host"
    assert body["provisionedAt"] is not None

    missing = await client.get(
        "/admin/tenants/00000000-0000-0000-0000-000000000000/deployment", headers=admin_headers
    )
    assert missing.status_code == 404
    assert missing.json()["error"]["code"] == "TENANT_NOT_FOUND"


@pytest.mark.asyncio
async def test_verify_domain_webhook(client, orchestrator, session_factory, admin_headers, test_data):
    await provision_and_wait(client, orchestrator, test_data.get("acme_custom_domain_request"))

    response = await client.post(
        "/admin/domains/verify",
        json={"domain": "blog.acme.com", "status": "verified"},
        headers=admin_headers,
    )

    assert response.status_code == 200
    assert response.json()["domainVerified"] is True
    tenant = await load_tenant(session_factory, "acme")
    assert tenant.domain_verified is True
    assert tenant.domain_verified_at is not None

    unknown = await client.post(
        "/admin/domains/verify",
        json={"domain": "blog.nobody.com", "status": "verified"},
        headers=admin_headers,
    )
    assert unknown.status_code == 404
