from nodality import create_app
from nodality.firebase_init import get_auth
from nodality.repositories import node_repository, user_repository
from nodality.services import theme_service


def seed_database():
    app = create_app()
    with app.app_context():
        auth = get_auth()

        password = 'password123'

        print("Creating users...")

        def create_firebase_user(email, admin=False):
            try:
                fb_user = auth.create_user(email=email, password=password)
            except auth.EmailAlreadyExistsError:
                fb_user = auth.get_user_by_email(email)
            user_repository.create_user_profile(fb_user.uid, email, admin=admin)
            return fb_user.uid

        admin_uid = create_firebase_user('admin@example.com', admin=True)
        writer_uid = create_firebase_user('writer@example.com')

        print("Creating themes...")
        themes = {}
        for title, description in [
            ('Philosophy', 'Arguments, thinkers and open problems.'),
            ('Physics', 'Notes on mechanics, fields and everything in between.'),
            ('Programming', 'Languages, tools and patterns.'),
        ]:
            themes[title] = theme_service.create_theme_with_auto_id(
                title, description, None, 'admin@example.com'
            )

        print("Creating nodes...")
        for title, content, author, theme in [
            ('Stoicism', 'Focus on what is within your control.', admin_uid, 'Philosophy'),
            ('Entropy', 'Closed systems tend towards disorder.', writer_uid, 'Physics'),
            ('Recursion', 'A function defined in terms of itself.', writer_uid, 'Programming'),
            ('Loose thought', 'Not attached to any theme yet.', writer_uid, None),
        ]:
            result = node_repository.save_node({
                'title': title,
                'content': content,
                'createdBy': author,
                'themeId': themes.get(theme),
            })
            if not result['success']:
                print(f"  failed to create node {title}: {result['error']}")

        print("\n" + "=" * 60)
        print("[admin]  admin@example.com")
        print("[writer] writer@example.com")
        print(f"Password: {password} (both)")
        print("=" * 60)
        print("Database seeded!")


if __name__ == '__main__':
    seed_database()
