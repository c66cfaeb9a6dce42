"""
Demo dataset served by /api/demo, for trying the profile flow without a crawl.
"""

from scrapers.base import ListingRecord

DEMO_SUBJECT_ID = "demo_artist_001"

DEMO_LOGS = [
    "Connecting to Demo Database...",
    "Fetching Movies...",
    "Fetching Books...",
    "Fetching Music...",
    "Found combined records...",
    "Preparing analysis...",
]

DEMO_RECORDS = [
    # Movies
    ListingRecord(
        title="楚门的世界 (The Truman Show)", category="movie", rating=5,
        comment="我们不仅被镜头监控，更被社会的期待监控。走出摄影棚需要莫大的勇气，哪怕外面是一片漆黑。",
        date="2023-11-15", tags=["剧情", "科幻"],
    ),
    ListingRecord(
        title="潜行者 (Stalker)", category="movie", rating=5,
        comment="塔可夫斯基的长镜头是时间的雕塑。在“区”里的每一步都是对信仰的拷问。",
        date="2024-01-20", tags=["科幻", "艺术"],
    ),
    ListingRecord(
        title="2001太空漫游", category="movie", rating=5,
        comment="人类的进化史就是一部工具的反噬史。黑石碑的沉默震耳欲聋。",
        date="2022-05-10", tags=["科幻", "哲学"],
    ),
    ListingRecord(
        title="一一", category="movie", rating=5,
        comment="电影发明以后，人类的生命延长了三倍。杨德昌用最冷静的镜头解剖了最温热的东亚家庭痛楚。",
        date="2021-08-15", tags=["剧情", "家庭"],
    ),
    ListingRecord(
        title="燃烧", category="movie", rating=5,
        comment="极度的暧昧与极度的阶级愤怒。李沧东把村上春树的虚无感实体化了。",
        date="2019-12-01", tags=["剧情", "悬疑"],
    ),
    ListingRecord(
        title="小时代", category="movie", rating=1,
        comment="空洞的拜金主义PPT。人物没有灵魂，只有名牌堆砌。",
        date="2013-07-01", tags=["爱情", "剧情"],
    ),
    # Books
    ListingRecord(
        title="局外人", category="book", rating=5,
        comment="今天，妈妈死了。也可能是昨天，我不知道。加缪用最冷漠的语言写出了对社会规训最大的反抗。",
        date="2020-03-12", tags=["法国", "存在主义"],
    ),
    ListingRecord(
        title="第二性", category="book", rating=5,
        comment="女人不是天生的，而是后天形成的。波伏娃的圣经，每一次重读都有新的震撼。",
        date="2019-06-01", tags=["女性主义", "哲学"],
    ),
    ListingRecord(
        title="三体", category="book", rating=4,
        comment="宏大的宇宙社会学。虽然文笔一般，但点子太硬了。黑暗森林法则让人不寒而栗。",
        date="2018-11-11", tags=["科幻"],
    ),
    ListingRecord(
        title="厌女", category="book", rating=5,
        comment="上野千鹤子的手术刀，精准地剖开了东亚社会肌理中的脓疮。读完很痛，但很清醒。",
        date="2021-09-20", tags=["社会学", "女性主义"],
    ),
    # Music
    ListingRecord(
        title="The Dark Side of the Moon", category="music", rating=5,
        comment="Time那首的前奏一响，我就知道自己老了。Pink Floyd是永恒的。",
        date="2015-05-20", tags=["摇滚", "迷幻"],
    ),
    ListingRecord(
        title="万能青年旅店", category="music", rating=5,
        comment="是谁来自山川湖海，却囿于昼夜厨房与爱。石家庄的忧郁，是我们这一代人的共同症候。",
        date="2016-08-01", tags=["独立", "摇滚"],
    ),
]
