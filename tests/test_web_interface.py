import unittest

from web_interface.app import create_app


class TestWebInterface(unittest.TestCase):

    def setUp(self):
        """Set up test fixtures"""
        self.client = create_app().test_client()
        self.vault = self.client.post('/api/initialize').get_json()

        self.mint = self.client.post('/api/tokens', json={'decimals': 6}).get_json()['mint']
        for name in ('depositor', 'borrower', 'sponsor', 'r1', 'r2', 'r3'):
            self.client.post('/api/wallets', json={'name': name})

        self.borrower = self.client.post('/api/wallets', json={'name': 'borrower'}).get_json()['pubkey']
        self.client.post('/api/whitelist', json={'address': self.borrower})

        self.source = self._account('depositor', 900)
        self.recipients = [self._account(name) for name in ('r1', 'r2', 'r3')]

    def _account(self, owner, amount=0):
        response = self.client.post('/api/accounts', json={'mint': self.mint, 'owner': owner, 'amount': amount})
        return response.get_json()['account']

    def _deposit(self, amount):
        return self.client.post('/api/deposit', json={
            'depositor': 'depositor', 'mint': self.mint, 'account': self.source, 'amount': amount
        })

    def _borrow(self, amount, borrower='borrower'):
        return self.client.post('/api/borrow', json={
            'borrower': borrower, 'fee_payer': 'sponsor', 'mint': self.mint,
            'amount': amount, 'recipients': self.recipients
        })

    def test_initialize(self):
        """Test the vault is created with an empty token set"""
        self.assertTrue(self.vault['success'])
        state = self.client.get('/api/vault').get_json()
        self.assertEqual(state['vault']['authority'], self.vault['authority'])
        self.assertEqual(state['vault']['token_count'], 1)
        self.assertEqual(state['whitelist']['addresses'], [self.borrower])

    def test_deposit_and_borrow(self):
        """Test the example flow over HTTP"""
        self.assertEqual(self._deposit(900).get_json()['custodial_balance'], 900)

        response = self._borrow(900)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json()['per_recipient'], 300)

        for account in self.recipients:
            self.assertEqual(self.client.get(f'/api/accounts/{account}').get_json()['balance'], 300)

        ledger = self.client.get(f'/api/borrower/{self.borrower}').get_json()
        self.assertEqual(ledger['borrowed_amounts'], [{'mint': self.mint, 'amount': 900}])

    def test_errors(self):
        """Test vault errors come back with their codes"""
        self._deposit(900)

        response = self._borrow(901)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json()['code'], 6007)

        response = self._borrow(300, borrower='r1')
        self.assertEqual(response.get_json()['code'], 6002)

        self.assertEqual(self.client.get(f'/api/borrower/{self.borrower}').status_code, 404)
        self.assertEqual(self._borrow(300, borrower='nobody').status_code, 404)

    def test_missing_field(self):
        """Test a request without a required field is a bad request, not a missing resource"""
        response = self.client.post('/api/whitelist', json={})
        self.assertEqual(response.status_code, 400)
        self.assertFalse(response.get_json()['success'])

        response = self.client.post('/api/borrow', json={'borrower': 'borrower'})
        self.assertEqual(response.status_code, 400)

    def test_remove_from_whitelist(self):
        """Test whitelist removal is reported"""
        response = self.client.delete(f'/api/whitelist/{self.borrower}')
        self.assertTrue(response.get_json()['removed'])

        response = self.client.delete(f'/api/whitelist/{self.borrower}')
        self.assertFalse(response.get_json()['removed'])


if __name__ == '__main__':
    unittest.main()
