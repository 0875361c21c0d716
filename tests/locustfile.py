"""
Load testing for the Ollama Chat Proxy.

Start the mock daemon and the proxy first:
    python mock_ollama.py
    python main.py

Run with locust:
    locust -f tests/locustfile.py --host=http://localhost:3000 --users=100 --spawn-rate=10

Or run the quick test (see tests/quick_load.py):
    python tests/locustfile.py
"""

import os
import sys

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

try:
    from locust import HttpUser, task, between
    LOCUST_AVAILABLE = True
except ImportError:
    LOCUST_AVAILABLE = False


MODEL = os.environ.get("TEST_MODEL", "llama3.1")


if LOCUST_AVAILABLE:

    class ChatUser(HttpUser):
        """Simulated chat UI user."""

        wait_time = between(1, 3)  # Wait 1-3 seconds between tasks

        def on_start(self):
            """Each simulated user keeps its own conversation."""
            self.history = []

        @task(10)
        def chat(self):
            """Send the next turn of a conversation (most common request)."""
            self.history.append({"role": "user", "content": f"Message {len(self.history)}"})
            with self.client.post(
                "/api/chat",
                json={"messages": self.history, "model": MODEL},
                catch_response=True,
            ) as response:
                if response.status_code == 200:
                    self.history.append({"role": "assistant", "content": response.json()["response"]})
                else:
                    response.failure(f"{response.status_code}: {response.text}")

        @task(2)
        def list_models(self):
            """Model picker refresh."""
            self.client.get("/api/models")

        @task(1)
        def health_check(self):
            """Test health endpoint."""
            self.client.get("/health")


if __name__ == "__main__":
    from quick_load import run_quick_load_test

    run_quick_load_test(model=MODEL)
