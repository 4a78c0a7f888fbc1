import os
from dotenv import load_dotenv

load_dotenv()

def clear_cache():
    db_path = os.getenv("SMARTNOTES_DB", "smartnotes.db")

    if os.path.exists(db_path):
        print(f"Removing saved notes and settings at {os.path.abspath(db_path)}...")
        try:
            os.remove(db_path)
            print("State cleared successfully.")
        except OSError as e:
            print(f"Error clearing state: {e}")
    else:
        print("No saved state found to clear.")

if __name__ == "__main__":
    confirm = input("This will delete every saved note, folder and setting. Are you sure? (y/n): ")
    if confirm.lower() == 'y':
        clear_cache()
    else:
        print("Operation cancelled.")
