"""
Seed the database with demo users, novels, chapters, segments and blog posts

Safe to run repeatedly: existing rows are matched by their unique keys and
segment texts are refreshed.
"""
import asyncio
from datetime import datetime, timedelta, timezone
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from kweezy.db.database import AsyncSessionLocal, init_db
from kweezy.models import User, Novel, Chapter, ChapterContentSegment, BlogPost
from kweezy.utils.auth import hash_password

DEMO_PASSWORD = "password123"

USERS = [
    {"email": "testuser@example.com", "username": "testuser", "role": "user", "username_color": "#818CF8"},
    {"email": "admin@example.com", "username": "admin", "role": "admin", "username_color": None},
]

NOVELS = [
    {
        "title": "The Whispering Woods",
        "author_name": "Eliza Thorne",
        "description": "A young adventurer gets lost in an ancient forest where the trees hold forgotten secrets and the shadows move on their own.",
        "chapters": [
            {
                "number": 1,
                "title": "The Hidden Path",
                "segments": [
                    "The air grew heavy as Elara ventured deeper, the familiar sunlight replaced by an eerie green glow filtering through the dense canopy. Every snap of a twig echoed unnaturally loud.",
                    "She checked her compass again, the needle spinning uselessly. Panic began to set in. This wasn't the Sunken Grove trail anymore.",
                    "A low whisper seemed to slither through the trees, words just beyond understanding. Goosebumps prickled her arms despite the humid air.",
                    "\"Just the wind,\" she muttered, though her heart hammered against her ribs. But the wind didn't form near-words.",
                    "Pushing aside a curtain of thick vines, she stumbled into a small clearing. In the center stood a moss-covered stone, pulsing faintly with the same green light.",
                    "Intricate carvings covered the stone, depicting scenes she couldn't decipher: swirling patterns, strange creatures, and figures with too many limbs.",
                    "As her fingers brushed the cool surface, the whispering intensified, coalescing into a single, clear thought in her mind: *Turn back.*",
                    "Fear warred with curiosity. What secrets did this place hold? And why did it feel like the forest itself was watching her?",
                    "She noticed a barely visible path leading away from the stone, deeper into the woods. It wasn't marked on any map she knew.",
                    "Taking a deep breath, Elara ignored the warning in her head. The allure of the unknown was too strong. She stepped onto the hidden path.",
                    "The trees seemed to lean in closer here, their branches intertwining overhead, blocking out even the strange green light. Darkness enveloped her.",
                    "Strange fungi glowed with a soft, blue luminescence, casting shifting shadows that danced like specters at the edge of her vision.",
                    "The ground beneath her feet softened, becoming spongy and uneven. It felt less like soil and more like... something breathing.",
                    "A sudden rustle in the undergrowth nearby made her jump. She spun around, hand instinctively reaching for the small knife at her belt.",
                    "Nothing. Just the oppressive silence of the ancient woods, broken only by the frantic thumping of her own heart.",
                    "She pressed on, the path twisting and turning unpredictably. Time seemed to lose meaning in the perpetual twilight.",
                    "Hours might have passed, or perhaps only minutes. Her water supply was dwindling, and the initial thrill of discovery had long since faded, replaced by a gnawing unease.",
                    "The path abruptly ended at the edge of a stagnant, black pool of water. Ripples disturbed its surface, though there was no breeze.",
                    "Something large shifted beneath the murky depths. Elara took a hasty step back, her boots sinking slightly into the damp earth.",
                    "The whispering returned, louder now, swirling around her like a physical force. *It sees you. It knows you.* She had to get out.",
                ],
            },
            {
                "number": 2,
                "title": "Echoes in the Mist",
                "segments": [
                    "Retreating from the pool, Elara tried to retrace her steps, but the hidden path seemed to have vanished behind her. Mist began to curl around the tree trunks.",
                    "The mist was cold, unnaturally so, carrying with it the scent of damp earth and something else... something metallic, like old blood.",
                    "Shapes flickered within the swirling grey, half-seen figures that dissolved when she tried to focus on them. The whispering intensified, now coming from all directions.",
                    "Panic clawed at her throat. She broke into a run, stumbling over unseen roots, branches snagging at her clothes like grasping hands.",
                    "The forest floor gave way beneath her, and she tumbled down a short, steep incline, landing hard at the bottom.",
                    "Dazed, she looked up. The mist was thinner here, revealing ancient, crumbling ruins overgrown with vines, remnants of a forgotten civilization.",
                    "A broken archway stood nearby, leading into darkness. It felt like an invitation and a threat all at once.",
                    "She could hear something moving within the ruins, a soft, rhythmic scraping sound.",
                ],
            },
        ],
    },
    {
        "title": "City of Endless Night",
        "author_name": "Marcus Cole",
        "description": "In a city perpetually shrouded in darkness, a detective uncovers a conspiracy that threatens to extinguish the last lights.",
        "chapters": [],
    },
    {
        "title": "Chronicles of the Star Drifter",
        "author_name": "Jax Nebula",
        "description": "Traversing the cosmos in a ship held together by hope and salvaged parts, a lone pilot searches for the legendary Nexus Point.",
        "chapters": [
            {
                "number": 1,
                "title": "Orion's Belt Run",
                "segments": [
                    "The *Nomad* shuddered as Jax pushed the sublight engines past their safety limits. Red warning lights flashed across the worn console.",
                    "\"Easy girl,\" Jax murmured, patting the console. \"Just a little further. We need to clear this patrol route before they scan us.\"",
                    "Outside the cockpit viewport, the nebulae of Orion painted the void in vibrant hues, a beautiful but dangerous stretch of space controlled by the Cygnus Combine.",
                    "A proximity alert blared. \"Scanners detected,\" the ship's synthesized voice announced calmly. \"Combine patrol vessel, closing fast.\"",
                    "\"Scrap!\" Jax cursed, yanking the control stick hard to port, sending the *Nomad* into a tight spiral towards a dense cluster of asteroids.",
                ],
            },
            {
                "number": 2,
                "title": "The Asteroid Graveyard",
                "segments": [
                    "The asteroid field was a chaotic graveyard of rock and ice. Jax expertly weaved the *Nomad* through the debris, the Combine ship hot on his tail.",
                    "\"Shields at forty percent,\" the ship reported. An energy bolt sizzled past the viewport.",
                    "\"Need to lose them,\" Jax muttered, spotting the wreck of a massive freighter ahead. \"Going dark.\"",
                    "He cut the main engines, diverting power to minimal life support and maneuvering thrusters, letting the *Nomad* drift silently towards the derelict ship.",
                    "The Combine patrol swept past, its searchlights cutting through the darkness, narrowly missing the *Nomad* hiding in the freighter's shadow.",
                ],
            },
        ],
    },
]

# (title, content, days since publication)
BLOG_POSTS = [
    (
        "Welcome to Kweezy!",
        "This is the first official blog post for the Kweezy app. Stay tuned for updates on new features, upcoming novels, and community events. We're excited to have you on this reading journey!",
        3,
    ),
    (
        "Feature Update: Themes & Fonts",
        "We've just rolled out new themes (Dark, Light, OLED) and font size adjustments in the chapter reader! Customize your reading experience in the Settings menu or directly in the reader header.",
        1,
    ),
    (
        "New Novel Announcement!",
        "Get ready to explore the cosmos! 'Chronicles of the Star Drifter' by Jax Nebula is coming soon to Kweezy. Prepare for thrilling space adventures and cosmic mysteries.",
        0,
    ),
]


async def seed_users(session: AsyncSession) -> dict:
    password_hash = hash_password(DEMO_PASSWORD)
    users = {}
    for entry in USERS:
        result = await session.execute(select(User).where(User.email == entry["email"]))
        user = result.scalar_one_or_none()
        if user:
            user.password_hash = password_hash
        else:
            user = User(
                email=entry["email"],
                username=entry["username"],
                password_hash=password_hash,
                role=entry["role"],
                username_color=entry["username_color"]
            )
            session.add(user)
        users[entry["username"]] = user
    await session.commit()
    print(f"✅ Users: {', '.join(users)}")
    return users


async def seed_novels(session: AsyncSession) -> None:
    for entry in NOVELS:
        result = await session.execute(select(Novel).where(Novel.title == entry["title"]))
        novel = result.scalar_one_or_none()
        if not novel:
            novel = Novel(title=entry["title"], author_name=entry["author_name"], description=entry["description"])
            session.add(novel)
            await session.flush()

        for chapter_entry in entry["chapters"]:
            result = await session.execute(
                select(Chapter).where(
                    Chapter.novel_id == novel.id,
                    Chapter.chapter_number == chapter_entry["number"]
                )
            )
            chapter = result.scalar_one_or_none()
            if not chapter:
                chapter = Chapter(novel_id=novel.id, chapter_number=chapter_entry["number"], title=chapter_entry["title"])
                session.add(chapter)
                await session.flush()

            for index, text_content in enumerate(chapter_entry["segments"], start=1):
                result = await session.execute(
                    select(ChapterContentSegment).where(
                        ChapterContentSegment.chapter_id == chapter.id,
                        ChapterContentSegment.segment_index == index
                    )
                )
                segment = result.scalar_one_or_none()
                if segment:
                    segment.text_content = text_content
                else:
                    session.add(ChapterContentSegment(chapter_id=chapter.id, segment_index=index, text_content=text_content))

        await session.commit()
        print(f"✅ Novel: {entry['title']} ({len(entry['chapters'])} chapters)")


async def seed_blog_posts(session: AsyncSession, author: User) -> None:
    now = datetime.now(timezone.utc)
    created = 0
    for title, content, days_ago in BLOG_POSTS:
        result = await session.execute(select(BlogPost.id).where(BlogPost.title == title))
        if result.scalar_one_or_none() is not None:
            continue
        session.add(BlogPost(
            title=title,
            content=content,
            author_id=author.id,
            published_at=now - timedelta(days=days_ago)
        ))
        created += 1
    await session.commit()
    print(f"✅ Blog posts: {created} created")


async def seed_all() -> None:
    await init_db()
    async with AsyncSessionLocal() as session:
        users = await seed_users(session)
        await seed_novels(session)
        await seed_blog_posts(session, users["admin"])
    print("\n🎉 Seeding finished!")


if __name__ == "__main__":
    print("=" * 60)
    print("Seeding database")
    print("=" * 60)
    asyncio.run(seed_all())
