"""
Directorio de usuarios, grupos y equipos (users.yaml).

Los equipos pueden anidar otros equipos con entradas "team:<nombre>"; se
aplanan de forma transitiva al cargar. También implementa la política de
autorización que consume arc.core.aaa.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from pydantic import Field

from arc.config.models import ConfigModel
from arc.core.errors import ConfigError


class User(ConfigModel):
    name: str
    uid: int = 0
    groups: List[str] = Field(default_factory=list)
    ssh_keys: List[str] = Field(default_factory=list)
    remove: bool = False


class Group(ConfigModel):
    name: str
    gid: int = 0
    remove: bool = False


class TeamConfig(ConfigModel):
    name: str
    sudo: bool = False
    users: List[str] = Field(default_factory=list)


class DataCenterAccess(ConfigModel):
    name: str
    teams: List[str] = Field(default_factory=list)


class UsersDocument(ConfigModel):
    users: List[User] = Field(default_factory=list)
    groups: List[Group] = Field(default_factory=list)
    teams: List[TeamConfig] = Field(default_factory=list)
    datacenters: List[DataCenterAccess] = Field(default_factory=list)


@dataclass
class Team:
    name: str
    sudo: bool = False
    users: List[User] = field(default_factory=list)
    subteams: List[str] = field(default_factory=list)

    def find_user(self, name: str) -> Optional[User]:
        for user in self.users:
            if user.name == name:
                return user
        return None


class Directory:
    """Usuarios y equipos ya resueltos."""

    def __init__(self, doc: Optional[UsersDocument] = None):
        doc = doc or UsersDocument()
        self.users: Dict[str, User] = {u.name: u for u in doc.users}
        self.groups: List[Group] = list(doc.groups)
        self.teams: Dict[str, Team] = {}
        self.datacenters: Dict[str, DataCenterAccess] = {d.name: d for d in doc.datacenters}

        for cfg in doc.teams:
            self.teams[cfg.name] = self._new_team(cfg)
        for team in self.teams.values():
            self._populate(team)

    def _new_team(self, cfg: TeamConfig) -> Team:
        team = Team(name=cfg.name, sudo=cfg.sudo)
        for entry in cfg.users:
            kind, _, sub = entry.partition(":")
            if kind == "team" and sub:
                if sub not in team.subteams:
                    team.subteams.append(sub)
                continue
            user = self.users.get(entry)
            if user is None:
                raise ConfigError(f"User {entry} is not defined.")
            team.users.append(user)
        return team

    def _populate(self, team: Team) -> None:
        # subteams crece mientras se recorre: aplanado transitivo
        i = 0
        while i < len(team.subteams):
            sub = self.teams.get(team.subteams[i])
            if sub is None:
                raise ConfigError(f"Team {team.subteams[i]} is not defined.")
            for name in sub.subteams:
                if name not in team.subteams:
                    team.subteams.append(name)
            for user in sub.users:
                if team.find_user(user.name) is None:
                    team.users.append(user)
            i += 1

    def team(self, name: str) -> Optional[Team]:
        return self.teams.get(name)

    def allowed(self, datacenter: str, user: str) -> bool:
        """
        Si el datacenter figura en `datacenters`, el usuario debe pertenecer a
        alguno de sus equipos; en otro caso está autorizado.
        """
        access = self.datacenters.get(datacenter)
        if access is None:
            return True
        for name in access.teams:
            team = self.teams.get(name)
            if team is not None and team.find_user(user) is not None:
                return True
        return False
