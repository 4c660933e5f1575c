"""Unit tests for app.core.config.Settings validators."""

import unittest

from pydantic import ValidationError

from app.core.config import DEFAULT_JWT_SECRET, Settings

STRONG_SECRET = "s" * 48


def _settings(**kwargs: object) -> Settings:
    """Build Settings from explicit values only (no .env file)."""
    return Settings(_env_file=None, **kwargs)


class TestDefaults(unittest.TestCase):
    def test_token_lifetime_is_seven_days(self) -> None:
        self.assertEqual(_settings().JWT_EXPIRE_MINUTES, 7 * 24 * 60)

    def test_cookie_and_bcrypt_defaults(self) -> None:
        settings = _settings()
        self.assertEqual(settings.AUTH_COOKIE_NAME, "token")
        self.assertEqual(settings.BCRYPT_ROUNDS, 12)
        self.assertEqual(settings.JWT_ALGORITHM, "HS256")


class TestDatabaseUrl(unittest.TestCase):
    def test_accepts_postgres_and_sqlite(self) -> None:
        for url in (
            "postgresql+psycopg2://u:p@db:5432/inkpost",
            "sqlite:///./data/dev.db",
            "sqlite://",
        ):
            with self.subTest(url=url):
                self.assertEqual(_settings(DATABASE_URL=f"  {url} ").DATABASE_URL, url)

    def test_rejects_other_schemes(self) -> None:
        with self.assertRaises(ValidationError):
            _settings(DATABASE_URL="mysql://u:p@localhost/inkpost")
        with self.assertRaises(ValidationError):
            _settings(DATABASE_URL="   ")


class TestJwtSettings(unittest.TestCase):
    def test_algorithm_normalized(self) -> None:
        self.assertEqual(_settings(JWT_ALGORITHM=" hs512 ").JWT_ALGORITHM, "HS512")

    def test_asymmetric_or_none_algorithm_rejected(self) -> None:
        for alg in ("RS256", "none", ""):
            with self.subTest(alg=alg):
                with self.assertRaises(ValidationError):
                    _settings(JWT_ALGORITHM=alg)

    def test_expire_minutes_bounds(self) -> None:
        with self.assertRaises(ValidationError):
            _settings(JWT_EXPIRE_MINUTES=0)
        with self.assertRaises(ValidationError):
            _settings(JWT_EXPIRE_MINUTES=43201)
        self.assertEqual(_settings(JWT_EXPIRE_MINUTES=60).JWT_EXPIRE_MINUTES, 60)

    def test_blank_secret_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            _settings(JWT_SECRET="   ")


class TestProdSecret(unittest.TestCase):
    """APP_ENV=prod refuses the default or a short JWT secret."""

    def test_default_secret_rejected_in_prod(self) -> None:
        with self.assertRaises(ValidationError):
            _settings(APP_ENV="prod", JWT_SECRET=DEFAULT_JWT_SECRET)

    def test_short_secret_rejected_in_prod(self) -> None:
        with self.assertRaises(ValidationError):
            _settings(APP_ENV="prod", JWT_SECRET="short-secret")

    def test_strong_secret_accepted_in_prod(self) -> None:
        settings = _settings(APP_ENV="prod", JWT_SECRET=STRONG_SECRET)
        self.assertEqual(settings.JWT_SECRET.get_secret_value(), STRONG_SECRET)

    def test_default_secret_allowed_in_dev(self) -> None:
        self.assertEqual(
            _settings(APP_ENV="dev").JWT_SECRET.get_secret_value(), DEFAULT_JWT_SECRET
        )


class TestBcryptRounds(unittest.TestCase):
    def test_bounds(self) -> None:
        with self.assertRaises(ValidationError):
            _settings(BCRYPT_ROUNDS=3)
        with self.assertRaises(ValidationError):
            _settings(BCRYPT_ROUNDS=17)
        self.assertEqual(_settings(BCRYPT_ROUNDS=4).BCRYPT_ROUNDS, 4)


if __name__ == "__main__":
    unittest.main()
