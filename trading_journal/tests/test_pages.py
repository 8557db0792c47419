"""
Tests for the Sign-in Pages and Health Endpoints
"""
from conftest import register, PASSWORD


class TestHealth:
    """Tests for the health endpoints."""

    def test_health(self, client):
        response = client.get('/api/health')
        body = response.get_json()

        assert response.status_code == 200
        assert body['success'] is True
        assert body['data']['status'] == 'ok'
        assert body['data']['components']['database'] == 'ok'

    def test_ready(self, client):
        response = client.get('/api/ready')

        assert response.status_code == 200
        assert response.get_json() == {'ready': True}

    def test_live(self, client):
        assert client.get('/api/live').get_json() == {'alive': True}

    def test_unknown_route_uses_envelope(self, client):
        response = client.get('/api/nothing-here')

        assert response.status_code == 404
        assert response.get_json() == {
            'success': False,
            'message': 'The requested resource was not found'
        }


class TestPages:
    """Tests for the server-rendered auth pages."""

    def test_index_redirects_to_login(self, client):
        response = client.get('/')

        assert response.status_code == 302
        assert response.headers['Location'].endswith('/login')

    def test_index_redirects_signed_in_user(self, auth_client):
        response = auth_client.get('/')

        assert response.status_code == 302
        assert response.headers['Location'].endswith('/dashboard/')

    def test_login_form(self, client):
        response = client.get('/login')

        assert response.status_code == 200
        assert b'Sign in' in response.data

    def test_login_success_sets_cookie(self, app, client):
        register(app.test_client(), 'trader@example.com', username='trader')

        response = client.post('/login', data={'identifier': 'trader', 'password': PASSWORD})

        assert response.status_code == 302
        assert response.headers['Location'].endswith('/dashboard/')
        assert client.get('/api/auth/me').status_code == 200

    def test_login_bad_password(self, app, client):
        register(app.test_client(), 'trader@example.com')

        response = client.post('/login', data={
            'identifier': 'trader@example.com', 'password': 'wrong-password'
        })

        assert response.status_code == 401
        assert b'Invalid email or password' in response.data
        assert client.get('/api/auth/me').status_code == 401

    def test_login_missing_fields(self, client):
        response = client.post('/login', data={})

        assert response.status_code == 400

    def test_register_signs_in(self, client):
        response = client.post('/register', data={
            'email': 'New@Example.com', 'username': 'newbie', 'password': PASSWORD
        })

        assert response.status_code == 302
        me = client.get('/api/auth/me').get_json()
        assert me['data']['user']['email'] == 'new@example.com'

    def test_register_duplicate_email(self, app, client):
        register(app.test_client(), 'trader@example.com')

        response = client.post('/register', data={
            'email': 'trader@example.com', 'password': PASSWORD
        })

        assert response.status_code == 409
        assert b'Email already registered' in response.data

    def test_logout_clears_session(self, auth_client):
        response = auth_client.get('/logout')

        assert response.status_code == 302
        assert auth_client.get('/api/auth/me').status_code == 401
