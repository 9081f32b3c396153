import pytest
from lxml import etree

from newsitem import EventManager, EventType, NewsItem, NewsItemConfig

NAR = "http://iptc.org/std/nar/2006-10-01/"

SAMPLE_NEWSML = b"""<?xml version="1.0" encoding="UTF-8"?>
<newsItem xmlns="http://iptc.org/std/nar/2006-10-01/" conformance="power" guid="2e6cd937-f366-4b5c-8b4a-fd2cc38245b1" standard="NewsML-G2" version="1">
  <itemMeta>
    <itemClass qcode="ninat:text"/>
    <versionCreated>2016-03-03T16:09:55+01:00</versionCreated>
    <firstCreated>2016-03-03T16:09:55+01:00</firstCreated>
    <pubStatus qcode="stat:usable"/>
    <service qcode="imchn:sydsvenskan" why="imext:main"/>
    <service qcode="imchn:hd"/>
    <title>Test article</title>
    <edNote>Check the quotes</edNote>
    <itemMetaExtProperty type="imext:uri" value="im://article/2e6cd937-f366-4b5c-8b4a-fd2cc38245b1"/>
    <itemMetaExtProperty type="npext:articleid" value="4711"/>
    <links xmlns="http://www.infomaker.se/newsml/1.0">
      <link rel="author" title="Jane Doe" type="x-im/author" uuid="11111111-1111-1111-1111-111111111111"/>
      <link rel="subject" title="Politics" type="x-im/category" uuid="cat-1"/>
      <link rel="subject" title="Malmo" type="x-im/place" uuid="place-1">
        <data>
          <geometry>POINT(13.0 55.6)</geometry>
        </data>
      </link>
      <link rel="subject" title="Skane" type="x-im/polygon" uuid="polygon-1"/>
      <link rel="subject" title="Sweden" type="x-im/organisation" uuid="org-1"/>
    </links>
  </itemMeta>
  <contentMeta>
    <contentCreated>2016-03-03T16:09:00+01:00</contentCreated>
    <contentModified>2016-03-04T10:00:00+01:00</contentModified>
    <metadata xmlns="http://www.infomaker.se/newsml/1.0">
      <object id="nv-1" type="x-im/newsvalue">
        <data>
          <score>3</score>
          <duration>86400</duration>
        </data>
      </object>
    </metadata>
    <links xmlns="http://www.infomaker.se/newsml/1.0">
      <link rel="alternate" title="Teaser" type="x-im/teaser" uuid="teaser-1"/>
      <link rel="alternate" title="Social" type="x-im/teaser" uuid="teaser-2"/>
    </links>
  </contentMeta>
  <contentSet>
    <inlineXML contenttype="application/vnd.iptc.g2.newsitem+xml">
      <idf xmlns="http://www.infomaker.se/idf/1.0" xml:lang="sv-SE" dir="ltr">
        <group type="body"/>
      </idf>
    </inlineXML>
  </contentSet>
</newsItem>
"""

EMPTY_NEWSML = b"""<newsItem xmlns="http://iptc.org/std/nar/2006-10-01/" guid="empty-1">
  <itemMeta/>
  <contentMeta/>
</newsItem>
"""


class EventRecorder:
    """Collects every change event delivered to DOCUMENT_CHANGED."""

    def __init__(self):
        self.events = []

    def __call__(self, event):
        self.events.append(event)

    @property
    def actions(self):
        return [event.action.value for event in self.events]

    def clear(self):
        self.events.clear()


@pytest.fixture
def sample_root():
    return etree.fromstring(SAMPLE_NEWSML)


@pytest.fixture
def empty_root():
    return etree.fromstring(EMPTY_NEWSML)


@pytest.fixture
def event_manager():
    return EventManager()


@pytest.fixture
def recorder(event_manager):
    recorder = EventRecorder()
    event_manager.subscribe(EventType.DOCUMENT_CHANGED, recorder)
    return recorder


@pytest.fixture
def config():
    return NewsItemConfig()


@pytest.fixture
def news_item(sample_root, event_manager, config):
    return NewsItem(sample_root, event_manager=event_manager, config=config)


@pytest.fixture
def empty_item(empty_root, event_manager, config):
    return NewsItem(empty_root, event_manager=event_manager, config=config)
