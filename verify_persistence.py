import time
import subprocess
import httpx
import sys
import os
import signal

BASE_URL = "http://127.0.0.1:8000"
API_PREFIX = "/v1"
SERVER_CMD = [sys.executable, "-m", "uvicorn", "asset_tracking.app.main:app", "--host", "127.0.0.1", "--port", "8000"]

def wait_for_server(retries=10, delay=2):
    url = f"{BASE_URL}/health"
    print(f"Waiting for server at {url}...")
    for i in range(retries):
        try:
            resp = httpx.get(url)
            if resp.status_code == 200:
                print("✅ Server is up!")
                return True
        except httpx.ConnectError:
            pass
        except Exception as e:
            print(f"Connect error: {e}")
        time.sleep(delay)
    print("❌ Server failed to start.")
    return False

def run_verification():
    # 1. Start Server (First Run)
    print("\n--- [Step 1] Starting Server (Initial) ---")
    proc = subprocess.Popen(
        SERVER_CMD,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        env={**os.environ, "DB_ECHO": "True"} # Enable echo to see SQL
    )
    
    try:
        if not wait_for_server():
            server_logs = proc.communicate(timeout=2)
            print("Server Stdout:", server_logs[0].decode())
            print("Server Stderr:", server_logs[1].decode())
            raise Exception("Server start failed")

        # 2. Create Asset
        print("\n--- [Step 2] Creating Asset (Persistence Test) ---")
        payload = {
            "title": "Persistence truck",
            "description": "Created by verify_persistence.py",
            "asset_type": "TRUCK",
            "location_data": {
                "location": {"latitude": 12.9716, "longitude": 77.5946},
                "timestamp": int(time.time())
            }
        }
        resp = httpx.post(f"{BASE_URL}{API_PREFIX}/assets", json=payload)
        
        if resp.status_code == 201:
            asset_id = resp.json()["id"]
            print(f"✅ Asset Created Successfully: {asset_id}")
        else:
            print(f"❌ Asset Creation Failed: {resp.status_code} {resp.text}")
            raise Exception("Asset creation failed")

    finally:
        print("\n--- [Step 3] Stopping Server ---")
        proc.send_signal(signal.SIGTERM)
        proc.wait()
    
    time.sleep(2) # Wait for port release

    # 3. Restart Server
    print("\n--- [Step 4] Restarting Server (Verification) ---")
    proc2 = subprocess.Popen(
        SERVER_CMD,
        stdout=subprocess.PIPE, 
        stderr=subprocess.PIPE
    )

    try:
        if not wait_for_server():
            raise Exception("Server restart failed")

        # 4. Read Asset Back
        print("\n--- [Step 5] Reading Asset (Post-Restart) ---")
        resp = httpx.get(f"{BASE_URL}{API_PREFIX}/assets/{asset_id}")
        
        if resp.status_code == 200:
            print("✅ Asset Found (Asset Persisted!)")
            print(resp.json())
            
            # 5. Verify History
            print("\n--- [Step 6] Verifying History ---")
            resp = httpx.get(f"{BASE_URL}{API_PREFIX}/assets/{asset_id}/history")
            if resp.status_code == 200 and resp.json()["history"]:
                print("✅ History Verified")
                print(resp.json()["centroid"])
            else:
                print(f"❌ History Check Failed: {resp.status_code}")
        else:
            print(f"❌ Asset Lookup Failed (Persistence Issue?): {resp.status_code} {resp.text}")
            raise Exception("Asset lookup failed after restart")

    finally:
        print("\n--- [Step 7] Stopping Server ---")
        proc2.send_signal(signal.SIGTERM)
        proc2.wait()

if __name__ == "__main__":
    run_verification()
