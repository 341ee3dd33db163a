from scene_prompter.db.init_db import init_db as create_all_tables

def init_db():
    print("Creating tables...")
    create_all_tables()
    print("Tables created.")

if __name__ == "__main__":
    init_db()
