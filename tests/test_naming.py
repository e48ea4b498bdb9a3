"""Unit tests for VPA naming."""

from tortoise_vpa.naming import tortoise_monitor_vpa_name, tortoise_updater_vpa_name


def test_names_have_role_prefixes():
    assert tortoise_monitor_vpa_name("mercari") == "tortoise-monitor-mercari"
    assert tortoise_updater_vpa_name("mercari") == "tortoise-updater-mercari"


def test_names_are_stable_and_distinct():
    for name in ("mercari", "a", "tortoise-monitor-x", ""):
        assert tortoise_monitor_vpa_name(name) == tortoise_monitor_vpa_name(name)
        assert tortoise_updater_vpa_name(name) == tortoise_updater_vpa_name(name)
        assert tortoise_monitor_vpa_name(name) != tortoise_updater_vpa_name(name)


def test_names_of_different_tortoises_do_not_collide():
    assert tortoise_monitor_vpa_name("a") != tortoise_monitor_vpa_name("b")
    assert tortoise_updater_vpa_name("a") != tortoise_updater_vpa_name("b")
