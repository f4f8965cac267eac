"""
Tests per app access.
"""

import hashlib

from django.conf import settings
from django.test import TestCase, SimpleTestCase

from .middleware import SessionCookieMiddleware
from .session import (
    generate_session_token,
    hash_password,
    is_valid_session,
    verify_password,
)

COOKIE_NAME = settings.METRI_AUTH["COOKIE_NAME"]


class SessionHelpersTestCase(SimpleTestCase):
    """Test per hash password e token"""

    def test_hash_password_sha256_hex(self):
        self.assertEqual(hash_password("abc"), hashlib.sha256(b"abc").hexdigest())

    def test_verify_password(self):
        expected = hash_password("segreta")
        self.assertTrue(verify_password("segreta", expected))
        self.assertTrue(verify_password("segreta", expected.upper()))
        self.assertFalse(verify_password("sbagliata", expected))
        self.assertFalse(verify_password("segreta", ""))

    def test_session_token_presence_only(self):
        token = generate_session_token()
        self.assertTrue(is_valid_session(token))
        self.assertNotEqual(token, generate_session_token())
        self.assertFalse(is_valid_session(""))
        self.assertFalse(is_valid_session(None))


class RedirectRulesTestCase(SimpleTestCase):
    """Test per le regole di redirect del middleware"""

    def resolve(self, path, authenticated):
        return SessionCookieMiddleware.resolve_redirect(path, authenticated)

    def test_public_menu_link_always_passes(self):
        self.assertIsNone(self.resolve("/eventos/123/cardapio/abc/", False))
        self.assertIsNone(self.resolve("/static/app.css", False))

    def test_access_page_with_session_goes_to_central(self):
        self.assertEqual(self.resolve("/access/", True), "/central/")
        self.assertIsNone(self.resolve("/access/", False))

    def test_protected_without_session_goes_to_access(self):
        self.assertEqual(self.resolve("/central/", False), "/access/")
        self.assertEqual(self.resolve("/central/eventos/", False), "/access/")
        self.assertIsNone(self.resolve("/central/eventos/", True))

    def test_other_paths_without_session_go_to_root(self):
        self.assertEqual(self.resolve("/eventos/123/", False), "/")
        self.assertEqual(self.resolve("/logout/", False), "/")
        self.assertIsNone(self.resolve("/", False))


class AccessViewTestCase(TestCase):
    """Test per accesso e logout"""

    def test_central_requires_session(self):
        response = self.client.get("/central/")
        self.assertRedirects(response, "/access/", fetch_redirect_response=False)

    def test_correct_password_sets_cookie(self):
        response = self.client.post("/access/", {"password": "segreta"})

        self.assertRedirects(response, "/central/", fetch_redirect_response=False)
        cookie = response.cookies[COOKIE_NAME]
        self.assertTrue(cookie.value)
        self.assertTrue(cookie["httponly"])
        self.assertEqual(cookie["samesite"], "Lax")
        self.assertEqual(int(cookie["max-age"]), 7 * 24 * 60 * 60)

    def test_wrong_password_denied(self):
        response = self.client.post("/access/", {"password": "sbagliata"})

        self.assertEqual(response.status_code, 200)
        self.assertNotIn(COOKIE_NAME, response.cookies)
        self.assertContains(response, "Accesso negato")

    def test_access_page_redirects_when_logged(self):
        self.client.cookies[COOKIE_NAME] = generate_session_token()
        response = self.client.get("/access/")
        self.assertRedirects(response, "/central/", fetch_redirect_response=False)

    def test_logout_clears_cookie(self):
        self.client.cookies[COOKIE_NAME] = generate_session_token()
        response = self.client.get("/logout/")

        self.assertRedirects(response, "/access/", fetch_redirect_response=False)
        self.assertEqual(response.cookies[COOKIE_NAME].value, "")

    def test_landing_without_session(self):
        response = self.client.get("/")
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, "Accedi")
