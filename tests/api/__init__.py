"""API tests package.

HTTP tests against the FastAPI app using TestClient. Handlers are replaced
through app.dependency_overrides, so these tests cover request validation,
status codes, cookies and RFC 9457 error bodies. Full-stack behavior is
covered by the integration tests.
"""
