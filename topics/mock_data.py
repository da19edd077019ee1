"""Built-in topics and article details used when the live feeds are unreachable."""
from datetime import datetime, timedelta, timezone

from topics.models import ArticleDetails, Topic


def _days_ago(days: int) -> datetime:
    return datetime.now(timezone.utc) - timedelta(days=days)


def mock_topics() -> list[Topic]:
    """Six evergreen topics, newest first, dated relative to now."""
    return [
        Topic(
            id="1",
            title="India's Digital Revolution: Transforming Education Through Technology",
            description="How digital initiatives are reshaping the educational landscape in India, "
                        "from rural schools to urban universities.",
            url="https://www.thehindu.com/news/national/digital-education-india/article123456.ece",
            source_name="The Hindu",
            category="Education & Technology",
            published_at=_days_ago(0),
        ),
        Topic(
            id="2",
            title="Climate Change Impact on Indian Agriculture: Challenges and Solutions",
            description="Examining how changing weather patterns are affecting crop yields and "
                        "farmer livelihoods across India.",
            url="https://www.hindustantimes.com/india-news/climate-agriculture-impact/story-789012.html",
            source_name="Hindustan Times",
            category="Environment & Agriculture",
            published_at=_days_ago(1),
        ),
        Topic(
            id="3",
            title="India's Space Program: Recent Achievements and Future Missions",
            description="A comprehensive look at ISRO's recent successes and upcoming ambitious "
                        "space exploration projects.",
            url="https://www.thehindu.com/sci-tech/science/isro-space-missions/article345678.ece",
            source_name="The Hindu",
            category="Science & Technology",
            published_at=_days_ago(2),
        ),
        Topic(
            id="4",
            title="Economic Recovery Post-Pandemic: India's Growth Trajectory",
            description="Analyzing India's economic resilience and recovery strategies following "
                        "the global pandemic.",
            url="https://www.hindustantimes.com/business/economic-recovery-india/story-456789.html",
            source_name="Hindustan Times",
            category="Economics & Business",
            published_at=_days_ago(3),
        ),
        Topic(
            id="5",
            title="Mental Health Awareness in India: Breaking the Stigma",
            description="Exploring the growing awareness about mental health issues and the need "
                        "for accessible mental healthcare.",
            url="https://www.thehindu.com/news/national/mental-health-awareness/article567890.ece",
            source_name="The Hindu",
            category="Health & Society",
            published_at=_days_ago(4),
        ),
        Topic(
            id="6",
            title="Renewable Energy Revolution: India's Path to Sustainability",
            description="How India is leading the global transition towards renewable energy "
                        "sources and sustainable development.",
            url="https://www.hindustantimes.com/india-news/renewable-energy-india/story-678901.html",
            source_name="Hindustan Times",
            category="Environment & Energy",
            published_at=_days_ago(5),
        ),
    ]


def mock_article_details() -> dict[str, ArticleDetails]:
    """Detailed articles keyed by topic id. Insertion order matters: the first is the fallback."""
    return {
        "1": ArticleDetails(
            id="1",
            title="India's Digital Revolution: Transforming Education Through Technology",
            content=(
                "India is witnessing an unprecedented transformation in its educational landscape "
                "through the strategic integration of digital technology. This revolution, accelerated "
                "by the National Education Policy 2020 and the pandemic, is reshaping how students "
                "learn and teachers teach across the country.\n\n"
                "In rural areas, where access to quality education has traditionally been limited, "
                "digital classrooms equipped with smart boards, tablets and internet connectivity are "
                "bridging the urban-rural education divide.\n\n"
                "Urban schools and universities are embracing artificial intelligence and virtual "
                "reality to create personalized learning experiences. Platforms like PM eVIDYA, DIKSHA "
                "and SWAYAM offer courses in multiple languages.\n\n"
                "Challenges remain. Device availability, connectivity and teacher training continue to "
                "affect students from economically disadvantaged backgrounds."
            ),
            summary=(
                "India is undergoing a major digital transformation in education, driven by government "
                "initiatives and accelerated by the pandemic. Challenges like the digital divide and "
                "teacher training remain."
            ),
            key_points=[
                "Digital classrooms bridging urban-rural education divide",
                "AI and VR creating personalized learning experiences",
                "Government initiatives like PM eVIDYA and DIKSHA democratizing education",
                "Challenges include digital divide and teacher training needs",
                "Future integration of blockchain, IoT, and analytics in education",
            ],
            related_topics=[
                "National Education Policy 2020",
                "Digital India Initiative",
                "AI in Education",
                "Rural Education Development",
                "Teacher Training Programs",
            ],
            source="The Hindu",
            published_at=_days_ago(0),
            author="Education Correspondent",
            url="https://www.thehindu.com/news/national/digital-education-india/article123456.ece",
        ),
        "2": ArticleDetails(
            id="2",
            title="Climate Change Impact on Indian Agriculture: Challenges and Solutions",
            content=(
                "Indian agriculture, which employs nearly half of the country's workforce, is facing "
                "unprecedented challenges due to climate change.\n\n"
                "Traditional monsoon cycles are becoming increasingly unpredictable. Some regions "
                "experience floods while others face prolonged droughts.\n\n"
                "Rising temperatures cause heat stress in wheat and rice, and extreme weather events "
                "can destroy entire crops within hours.\n\n"
                "Climate-resilient crop varieties, precision farming and better water management offer "
                "a path forward."
            ),
            summary=(
                "Climate change is severely impacting Indian agriculture through altered rainfall "
                "patterns, rising temperatures and extreme weather. Climate-resilient crops and "
                "precision farming offer hope."
            ),
            key_points=[
                "Unpredictable monsoon patterns disrupting traditional farming",
                "Rising temperatures reducing wheat and rice yields",
                "Extreme weather events causing massive crop losses",
                "Climate-resilient crop varieties showing promise",
                "Precision farming and water management as key solutions",
            ],
            related_topics=[
                "Monsoon Patterns in India",
                "Food Security",
                "Sustainable Agriculture",
                "Water Conservation",
                "Crop Insurance Schemes",
            ],
            source="Hindustan Times",
            published_at=_days_ago(1),
            author="Agricultural Correspondent",
            url="https://www.hindustantimes.com/india-news/climate-agriculture-impact/story-789012.html",
        ),
    }
