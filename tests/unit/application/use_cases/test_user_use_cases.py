"""
Unit tests for profile and authentication use cases.
"""

import pytest
from decimal import Decimal

from hourbook.application.dto.user_dto import (
    SignInRequestDTO,
    SignUpRequestDTO,
    UpdateHourlyRateRequestDTO,
    UpdatePasswordRequestDTO,
    UpdateProfileNameRequestDTO,
)
from hourbook.application.use_cases.auth_use_cases import (
    SignInUseCase,
    SignOutUseCase,
    SignUpUseCase,
    UpdatePasswordUseCase,
)
from hourbook.application.use_cases.user_use_cases import (
    EnsureProfileUseCase,
    GetCurrentUserUseCase,
    ListUsersUseCase,
    UpdateHourlyRateUseCase,
    UpdateProfileNameUseCase,
)
from hourbook.domain.models.user import UserRole
from hourbook.domain.services.access_policy import Caller
from hourbook.domain.services.auth_service import AuthIdentity
from fakes import FakeIdentityProvider, Workspace


class TestEnsureProfile:

    def setup_method(self):
        self.ws = Workspace()

    @pytest.mark.asyncio
    async def test_missing_profile_created_as_employee(self):
        identity = AuthIdentity(
            user_id="new-1",
            email="nieuw@example.com",
            metadata={"role": "admin"}
        )

        result = await EnsureProfileUseCase(self.ws.users).execute(identity)

        assert result.data.role == UserRole.EMPLOYEE
        assert result.data.full_name == "nieuw"
        assert self.ws.users.get_by_id("new-1") is not None

    @pytest.mark.asyncio
    async def test_existing_profile_returned(self):
        identity = AuthIdentity(user_id=Workspace.ADMIN_ID, email="anna@example.com")

        result = await EnsureProfileUseCase(self.ws.users).execute(identity)

        assert result.data.role == UserRole.ADMIN
        assert result.data.full_name == "Anna Admin"


class TestProfile:

    def setup_method(self):
        self.ws = Workspace()
        self.employee = Caller(Workspace.EMPLOYEE_ID, "employee")
        self.admin = Caller(Workspace.ADMIN_ID, "admin")

    @pytest.mark.asyncio
    async def test_get_current_user(self):
        result = await GetCurrentUserUseCase(self.ws.users).set_caller(self.employee).execute()

        assert result.data.email == "erik@example.com"
        assert result.data.hourly_rate == Decimal("60")

    @pytest.mark.asyncio
    async def test_rename(self):
        use_case = UpdateProfileNameUseCase(self.ws.users).set_caller(self.employee)

        result = await use_case.execute(UpdateProfileNameRequestDTO(full_name="Erik de Vries"))

        assert result.data.full_name == "Erik de Vries"
        assert self.ws.users.get_by_id(Workspace.EMPLOYEE_ID).full_name == "Erik de Vries"

    @pytest.mark.asyncio
    async def test_blank_name_rejected(self):
        use_case = UpdateProfileNameUseCase(self.ws.users).set_caller(self.employee)

        result = await use_case.execute(UpdateProfileNameRequestDTO(full_name="   "))

        assert result.error_code == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_change_hourly_rate(self):
        use_case = UpdateHourlyRateUseCase(self.ws.users).set_caller(self.employee)

        result = await use_case.execute(UpdateHourlyRateRequestDTO(hourly_rate="72.50"))

        assert result.data.hourly_rate == Decimal("72.50")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("rate", ["0", "-10", "abc"])
    async def test_invalid_hourly_rate(self, rate):
        use_case = UpdateHourlyRateUseCase(self.ws.users).set_caller(self.employee)

        result = await use_case.execute(UpdateHourlyRateRequestDTO(hourly_rate=rate))

        assert result.error_code == "VALIDATION_ERROR"
        assert self.ws.users.get_by_id(Workspace.EMPLOYEE_ID).hourly_rate == Decimal("60")

    @pytest.mark.asyncio
    async def test_user_directory_for_admins(self):
        result = await ListUsersUseCase(self.ws.users).set_caller(self.admin).execute()

        assert [user.full_name for user in result.data] == ["Anna Admin", "Erik Employee"]

    @pytest.mark.asyncio
    async def test_user_directory_denied_to_employees(self):
        result = await ListUsersUseCase(self.ws.users).set_caller(self.employee).execute()

        assert result.error_code == "AUTHORIZATION_ERROR"


class TestAuthentication:

    def setup_method(self):
        self.ws = Workspace()
        self.provider = FakeIdentityProvider()

    def sign_up(self, **fields):
        request = SignUpRequestDTO(**{
            "email": "jan@example.com",
            "password": "geheim1",
            "full_name": "Jan Jansen",
            "role": "admin",
            **fields
        })
        return SignUpUseCase(self.provider, self.ws.users).execute(request)

    @pytest.mark.asyncio
    async def test_sign_up_stores_role(self):
        result = await self.sign_up()

        assert result.success is True
        assert result.data.pending_confirmation is False
        profile = self.ws.users.get_by_id(result.data.user_id)
        assert profile.role == UserRole.ADMIN
        assert profile.full_name == "Jan Jansen"

    @pytest.mark.asyncio
    async def test_sign_up_pending_confirmation(self):
        self.provider.confirm_email = False

        result = await self.sign_up()

        assert result.data.pending_confirmation is True
        assert "Controleer je email" in result.data.message

    @pytest.mark.asyncio
    async def test_duplicate_email(self):
        await self.sign_up()

        result = await self.sign_up()

        assert result.error_code == "AUTHENTICATION_ERROR"
        assert result.error == "Dit email adres is al geregistreerd"
        assert result.metadata["kind"] == "already_registered"

    @pytest.mark.asyncio
    async def test_short_password_never_reaches_provider(self):
        result = await self.sign_up(password="123")

        assert result.error_code == "VALIDATION_ERROR"
        assert self.provider.accounts == {}

    @pytest.mark.asyncio
    async def test_sign_in_returns_session_and_profile(self):
        await self.sign_up()

        result = await SignInUseCase(self.provider, self.ws.users).execute(
            SignInRequestDTO(email="jan@example.com", password="geheim1")
        )

        assert result.data.access_token == "token-user-1"
        assert result.data.user.role == "admin"

    @pytest.mark.asyncio
    async def test_sign_in_with_wrong_password(self):
        await self.sign_up()

        result = await SignInUseCase(self.provider, self.ws.users).execute(
            SignInRequestDTO(email="jan@example.com", password="fout")
        )

        assert result.error == "Ongeldige inloggegevens"

    @pytest.mark.asyncio
    async def test_sign_out(self):
        use_case = SignOutUseCase(self.provider).set_caller(Caller("user-1", "admin"))

        result = await use_case.execute("token-user-1")

        assert result.success is True
        assert self.provider.signed_out == ["token-user-1"]

    @pytest.mark.asyncio
    async def test_update_password_needs_confirmation(self):
        use_case = UpdatePasswordUseCase(self.provider).set_caller(Caller("user-1", "employee"))

        result = await use_case.with_token("token-user-1").execute(
            UpdatePasswordRequestDTO(new_password="nieuw123", confirm_password="nieuw124")
        )

        assert result.error_code == "VALIDATION_ERROR"
        assert self.provider.passwords_changed == []

    @pytest.mark.asyncio
    async def test_update_password(self):
        use_case = UpdatePasswordUseCase(self.provider).set_caller(Caller("user-1", "employee"))

        result = await use_case.with_token("token-user-1").execute(
            UpdatePasswordRequestDTO(new_password="nieuw123", confirm_password="nieuw123")
        )

        assert result.success is True
        assert self.provider.passwords_changed == ["nieuw123"]
