"""Tests for password hashing and strength rules."""

import unittest

from domain.model.errors import ValidationError
from services.passwords import burn_verify, hash_password, validate_password, verify_password


class TestHashing(unittest.TestCase):

    def test_hash_is_not_plaintext_and_verifies(self):
        hashed = hash_password('Secret#123')
        self.assertNotEqual(hashed, 'Secret#123')
        self.assertTrue(hashed.startswith('$2'))
        self.assertTrue(verify_password('Secret#123', hashed))

    def test_wrong_password_fails(self):
        self.assertFalse(verify_password('Secret#124', hash_password('Secret#123')))

    def test_salted(self):
        self.assertNotEqual(hash_password('Secret#123'), hash_password('Secret#123'))

    def test_long_password_does_not_raise(self):
        long_password = 'Aa1!' * 30
        self.assertTrue(verify_password(long_password, hash_password(long_password)))

    def test_burn_verify_returns_nothing(self):
        self.assertIsNone(burn_verify('anything'))


class TestValidatePassword(unittest.TestCase):

    def test_strong_password_accepted(self):
        validate_password('Str0ng!pass')

    def test_weak_passwords_rejected(self):
        cases = {
            'short': 'Aa1!',
            'no upper': 'lowercase1!',
            'no lower': 'UPPERCASE1!',
            'no digit': 'NoDigits!!',
            'no special': 'NoSpecial123',
        }
        for label, password in cases.items():
            with self.subTest(label):
                with self.assertRaises(ValidationError):
                    validate_password(password)


if __name__ == '__main__':
    unittest.main()
