import dataclasses
import unittest

from gasless_vault.errors import InvalidSignature
from gasless_vault.keys import Keypair, instruction_message, verify_signature


class TestKeys(unittest.TestCase):

    def setUp(self):
        """Set up test fixtures"""
        self.alice = Keypair()
        self.bob = Keypair()

    def test_pubkey_format(self):
        """Test compressed public key encoding"""
        pubkey = self.alice.pubkey
        self.assertEqual(len(pubkey), 66)
        self.assertIn(pubkey[:2], ('02', '03'))

    def test_restore_from_secret(self):
        """Test a key pair rebuilt from its secret has the same identity"""
        restored = Keypair.from_secret_hex(self.alice.secret_hex())
        self.assertEqual(restored.pubkey, self.alice.pubkey)

    def test_verify(self):
        """Test a genuine signature returns the signer"""
        sig = self.alice.sign_instruction('add_to_whitelist', vault='aa' * 32, address=self.bob.pubkey)
        signer = verify_signature(sig, 'add_to_whitelist', vault='aa' * 32, address=self.bob.pubkey)
        self.assertEqual(signer, self.alice.pubkey)

    def test_list_params(self):
        """Test tuples and lists sign identically"""
        sig = self.alice.sign_instruction('borrow_and_distribute', recipients=('r1', 'r2', 'r3'))
        verify_signature(sig, 'borrow_and_distribute', recipients=['r1', 'r2', 'r3'])

    def test_rejects_mismatches(self):
        """Test instruction, parameter and key substitution are all caught"""
        sig = self.alice.sign_instruction('deposit', amount=900)

        with self.assertRaises(InvalidSignature):
            verify_signature(sig, 'initialize')

        with self.assertRaises(InvalidSignature):
            verify_signature(sig, 'deposit', amount=901)

        with self.assertRaises(InvalidSignature):
            verify_signature(dataclasses.replace(sig, pubkey=self.bob.pubkey), 'deposit', amount=900)

        with self.assertRaises(InvalidSignature):
            verify_signature(dataclasses.replace(sig, params=(('amount', 901),)), 'deposit')

        with self.assertRaises(InvalidSignature):
            verify_signature(dataclasses.replace(sig, pubkey='zz'), 'deposit')

    def test_nonce_is_signed(self):
        """Test each signature carries its own nonce and the nonce cannot be swapped"""
        first = self.alice.sign_instruction('deposit', amount=900)
        second = self.alice.sign_instruction('deposit', amount=900)
        self.assertNotEqual(first.nonce, second.nonce)
        self.assertNotEqual(first.replay_key, second.replay_key)

        with self.assertRaises(InvalidSignature):
            verify_signature(dataclasses.replace(first, nonce=second.nonce), 'deposit', amount=900)

    def test_message_is_canonical(self):
        """Test parameter order does not change the signed bytes"""
        self.assertEqual(
            instruction_message('deposit', {'amount': 1, 'mint': 'm'}),
            instruction_message('deposit', {'mint': 'm', 'amount': 1})
        )


if __name__ == '__main__':
    unittest.main()
