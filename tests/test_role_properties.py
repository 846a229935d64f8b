from __future__ import annotations

import pytest

hypothesis = pytest.importorskip("hypothesis")
st = pytest.importorskip("hypothesis.strategies")

from core.errors import Forbidden
from core.models import AdminWhitelist
from core.services.auth import Identity, authorize

_settings = hypothesis.settings(
    max_examples=30,
    deadline=None,
    suppress_health_check=[hypothesis.HealthCheck.function_scoped_fixture],
)

_local = st.from_regex(r"[a-z][a-z0-9]{0,15}", fullmatch=True)


@_settings
@hypothesis.given(local=_local)
def test_domain_members_are_users_not_admins(session, local):
    email = f"{local}@college.edu"
    assert authorize(session, Identity(user_id=local, email=email), "user").role == "user"
    with pytest.raises(Forbidden):
        authorize(session, Identity(user_id=local, email=email), "admin")


@_settings
@hypothesis.given(local=_local, dept=st.sampled_from(["CSE", "ECE", "MECH", None]))
def test_whitelisted_emails_are_admins_never_users(session, local, dept):
    email = f"wl-{local}@college.edu"
    if session.get(AdminWhitelist, email) is None:
        session.add(AdminWhitelist(email=email, department=dept))
        session.commit()
    entry = session.get(AdminWhitelist, email)
    ident = authorize(session, Identity(user_id=local, email=email), "admin")
    assert ident.is_admin
    assert ident.department == entry.department
    with pytest.raises(Forbidden):
        authorize(session, Identity(user_id=local, email=email), "user")
