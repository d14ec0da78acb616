"""
Instancia de un pod y su motor de ciclo de vida.

Create:   provider -> rol -> IP elástica -> volúmenes preservados, y después
          tags -> registros A -> setup arc -> usuarios -> permisos ->
          hostname/dhcp/repos -> setup de cada volumen no boot.
Destroy:  permisos -> paging off -> registros A -> volúmenes -> IP elástica
          -> provider.
Replace:  destroy preserve_volume [preserve_eip] -> create con los mismos
          flags -> provision initial (salvo noprovision).
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional

from arc.command import Command as Cmd
from arc.command import copy, local, message, remote, sudo
from arc.core import aaa, env, log, msg
from arc.core.errors import ConfigError, ProviderError, RemoteExecError
from arc.datacenter.base import commands, guarded, show_help, test_skip, trailer, unknown_command
from arc.datacenter.users import user_commands
from arc.datacenter.volume import ElasticIP, Role, Volumes
from arc.resource import Lifecycle
from arc.resource.provider import ProviderInstance
from arc.route import Command, Request, Response

logger = logging.getLogger(__name__)

ARC_LIB = "/usr/lib/arc"
WAIT_SECONDS = 300
SINGLE_RESOURCE_FLAGS = ("aide", "role", "users", "tags")


def _ok(success: bool) -> Response:
    return Response.OK if success else Response.FAIL


class Instance(Lifecycle):
    kind = "Instance"

    def __init__(self, pod, subnet, keypair, prov, name: str):
        logger.debug("Initializing Instance %r", name)
        self.name = name
        self.pod = pod
        self.subnet = subnet
        self.keypair = keypair
        self.dns = None
        self.private_a_record = None
        self.public_a_record = None

        network = pod.cluster.compute.datacenter.network
        self.security_groups = []
        for group_name in pod.cfg.security_groups:
            group = network.security_groups.find(group_name)
            if group is None:
                raise ConfigError(f"Instance {name}: unknown secgroup name {group_name}")
            self.security_groups.append(group)

        self.role = Role(self, prov, pod.cfg.role)
        self.volumes = Volumes(self, prov, pod.cfg.volumes)
        self.provider: ProviderInstance = prov.new_instance(self)
        self.eip: Optional[ElasticIP] = None
        if subnet.access == "public_elastic":
            self.eip = ElasticIP(self, prov)

    # --- Atributos ---

    @property
    def servertype(self) -> str:
        return self.pod.servertype

    @property
    def version(self) -> str:
        return self.pod.cfg.version

    @property
    def image(self) -> str:
        return self.pod.cfg.image

    @property
    def instance_type(self) -> str:
        return self.pod.cfg.instance_type

    @property
    def id(self) -> str:
        return self.provider.id

    @property
    def image_id(self) -> str:
        return self.provider.image_id

    @property
    def state(self) -> str:
        return self.provider.state

    @property
    def private_ip_address(self) -> str:
        return self.provider.private_ip_address

    @property
    def public_ip_address(self) -> str:
        if self.eip is not None and self.eip.id:
            return self.eip.ip_address
        return self.provider.public_ip_address

    @property
    def root_user(self) -> str:
        if self.image.startswith("centos"):
            return "centos"
        if self.image.startswith("ubuntu"):
            return "ubuntu"
        return "root"

    @property
    def arc(self):
        return self.pod.cluster.compute.datacenter.arc

    @property
    def runner(self):
        return self.arc.runner

    @property
    def domain(self) -> str:
        if self.dns is not None:
            return self.dns.domain
        return f"{self.pod.cluster.compute.name}.local"

    @property
    def private_hostname(self) -> str:
        return f"{self.name}-internal"

    @property
    def public_hostname(self) -> str:
        if self.subnet.access in ("public", "public_elastic"):
            return self.name
        return ""

    @property
    def private_fqdn(self) -> str:
        return f"{self.private_hostname}.{self.domain}"

    @property
    def public_fqdn(self) -> str:
        if not self.public_hostname:
            return ""
        return f"{self.public_hostname}.{self.domain}"

    def fqdn_match(self, fqdns: List[str]) -> bool:
        """True si alguno de `fqdns` es el FQDN privado o público (con o sin punto final)."""
        mine = {f.rstrip(".") for f in (self.private_fqdn, self.public_fqdn) if f}
        return any(f.rstrip(".") in mine for f in fqdns)

    def created(self) -> bool:
        return self.provider.created()

    def destroyed(self) -> bool:
        return self.provider.destroyed()

    def started(self) -> bool:
        return self.provider.started()

    def stopped(self) -> bool:
        return self.provider.stopped()

    def set_tags(self, tags: Dict[str, str]) -> None:
        self.provider.set_tags(tags)

    # --- Router ---

    @guarded
    def route(self, req: Request) -> Response:
        log.route(req, f"Instance {self.name!r}")
        if req.top():
            self.help()
            return Response.FAIL
        if test_skip(req):
            return Response.OK

        if req.command is Command.LOAD:
            return self.load(req)
        if req.command is Command.HELP:
            self.help()
            return Response.OK
        if req.command is Command.CONFIG:
            self.config()
            return Response.OK
        if req.command is Command.INFO:
            self.info()
            return Response.OK
        if req.command is Command.CREATE:
            return self._create(req)
        if req.command is Command.PROVISION:
            return self._provision(req)
        if req.command in (Command.DESTROY, Command.START, Command.STOP, Command.RESTART, Command.REPLACE):
            return self.lifecycle(req)
        if req.command is Command.AUDIT:
            aaa.new_audit("Instance")
            self.audit("Instance")
            return Response.OK
        return unknown_command("instance", req)

    def skip_message(self, req: Request) -> str:
        if req.command is Command.START and not self.destroyed() and not self.stopped():
            return "Instance has been started. Skipping..."
        if req.command is Command.STOP and not self.destroyed() and not self.started():
            return "Instance has been stopped. Skipping..."
        return super().skip_message(req)

    def done_message(self, past: str) -> str:
        return f"{past}: {self.id or self.name}"

    # --- Load ---

    def load(self, req: Request) -> Response:
        if self.dns is None:
            self.dns = self.pod.cluster.compute.datacenter.dns

        resp = self.provider.route(req)
        if resp != Response.OK:
            return resp

        if self.dns is not None:
            self._new_dns_a_records()
            if self.created():
                resp = self._load_dns_a_records(req)
                if resp != Response.OK:
                    return resp

        if self.eip is not None:
            self.eip.load()
        if self.role.name:
            self.role.load()
        return Response.OK

    def reload(self, req: Request, test, action: str) -> bool:
        req.flags.append("reload")
        try:
            return msg.wait(
                f"Waiting for Instance {self.name}, {self.id} to {action}",
                f"Instance {self.name}, {self.id} failed to {action}",
                WAIT_SECONDS,
                test,
                lambda: self.load(req) == Response.OK,
            )
        finally:
            req.flags.remove("reload")

    # --- DNS ---

    def _new_dns_a_records(self) -> None:
        audit_ignore = self.pod.cluster.audit_ignore
        if self.private_a_record is None:
            self.private_a_record = self.dns.new_dynamic_a_record(self, self.private_hostname, "private", audit_ignore)
        if self.public_hostname and self.public_a_record is None:
            self.public_a_record = self.dns.new_dynamic_a_record(
                self, self.public_hostname, self.subnet.access, audit_ignore
            )

    def _load_dns_a_records(self, req: Request) -> Response:
        logger.debug("Loading Instance %r, DNS A Records", self.name)
        for record in (self.private_a_record, self.public_a_record):
            if record is not None and record.route(req) != Response.OK:
                return Response.FAIL
        resp = self._update_dns_a_record(req, self.private_a_record, self.private_ip_address, "private")
        if resp != Response.OK:
            return resp
        return self._update_dns_a_record(req, self.public_a_record, self.public_ip_address, "public")

    def _update_dns_a_record(self, req: Request, record, ip: str, ip_type: str) -> Response:
        if record is None or not ip:
            return Response.OK
        values = record.dynamic_values()
        if len(values) != 1 or values[0] == ip:
            return Response.OK
        logger.debug("Updating Instance %r, DNS A Record %r", self.name, record.id)
        msg.warn(f"Instance {self.name!r}, configured {ip_type} ip {values[0]!r} does not match deployed ip {ip!r}")
        update = req.clone(Command.CREATE)
        update.flags.append("skip_created_check")
        return record.route(update)

    def _create_dns_a_records(self, req: Request) -> Response:
        if self.dns is None:
            return Response.OK
        create = req.clone(Command.CREATE)
        for record in (self.private_a_record, self.public_a_record):
            if record is not None and record.route(create) != Response.OK:
                return Response.FAIL
        return Response.OK

    def _destroy_dns_a_records(self, req: Request) -> Response:
        if self.dns is None:
            return Response.OK
        destroy = req.clone(Command.DESTROY)
        for record in (self.public_a_record, self.private_a_record):
            if record is not None and record.route(destroy) != Response.OK:
                return Response.FAIL
        return Response.OK

    # --- Create ---

    def _create(self, req: Request) -> Response:
        existed = self.created()
        resp = self.lifecycle(req)
        if resp != Response.OK or existed or req.flag("noprovision"):
            return resp
        req.flags.append("initial")
        try:
            return self._provision(req)
        finally:
            req.flags.remove("initial")

    def create(self, req: Request) -> Response:
        if not self.subnet.created():
            msg.error(
                f"Instance {self.name!r} cannot be associated with subnet {self.subnet.name!r}. "
                "The subnet group needs to be created."
            )
            return Response.FAIL
        resp = self.provider.route(req)
        if resp != Response.OK:
            return resp
        self.role.attach()
        if self.eip is not None:
            if not req.flag("preserve_eip"):
                self.eip.create()
            self.eip.attach()
        if req.flag("preserve_volume"):
            for volume in self.volumes:
                if volume.preserve and not volume.attached():
                    volume.attach()
        return Response.OK

    def post_create(self, req: Request) -> Response:
        self.create_tags(req)
        self.create_security_tags()
        resp = self._create_dns_a_records(req)
        if resp != Response.OK:
            return resp
        resp = self.setup_arc("setup arc", as_root=True)
        if resp != Response.OK:
            return resp
        resp = self.configure_users(as_root=True)
        if resp != Response.OK:
            return resp
        if not req.flag("bootstrap"):
            resp = self.setup_arc("fix arc permissions")
            if resp != Response.OK:
                return resp

        dc_name = self.pod.cluster.compute.name
        consul_domain = f"{self.dns.subdomain}.consul" if self.dns is not None else f"{dc_name}.consul"
        repos = "disabled" if req.flag("bootstrap") else "enabled"
        batch = [
            remote("setup hostname", f"{ARC_LIB}/create/setup_hostname", self.private_fqdn),
            remote("setup dhcp", f"{ARC_LIB}/create/setup_dhcp", consul_domain, self.domain),
            remote("setup repos", f"{ARC_LIB}/create/setup_repos", repos),
        ]
        for volume in self.volumes:
            if volume.boot:
                continue
            args = [volume.device, volume.mount_point, volume.cfg.fstype, str(volume.cfg.inodes)]
            if req.flag("preserve_volume") and volume.preserve:
                args.append("skip_format")
            batch.append(remote(f"setup volume for {volume.device}", f"{ARC_LIB}/create/setup_volume", *args))
        return _ok(self.runner.run(batch, self))

    def setup_arc(self, desc: str, as_root: bool = False) -> Response:
        batch = [
            remote(desc, f"{ARC_LIB}/create/setup_arc", dest="/tmp/setup_arc"),
            copy("install arc.sh library", f"{ARC_LIB}/arc.sh"),
        ]
        return _ok(self.runner.run(batch, self, as_root=as_root))

    def configure_users(self, as_root: bool = False) -> Response:
        batch = user_commands(self.pod.cfg.teams, self.arc.users)
        if as_root:
            return _ok(self.runner.run_quiet_as_root(batch, self))
        return _ok(self.runner.run_quiet(batch, self))

    def create_tags(self, req: Request) -> None:
        tags = {
            "Name": self.name,
            "Created By": req.user_id,
            "Last Modified By": req.user_id,
            "Last Modified": req.time,
            "DataCenter": req.datacenter,
        }
        msg.info(f"Set Tags: {self.name}")
        self.set_tags(tags)

        msg.info(f"Set Volume Tags: {self.name}")
        for volume in self.volumes:
            mnt = f", {volume.mount_point}" if volume.mount_point else ""
            msg.detail(f"Set volume: {volume.device}{mnt}")
            try:
                volume.set_tags(dict(tags, Name=volume.mount_point or "/"))
            except ProviderError as e:
                msg.warn(f"Failed to set tags for {volume.device}\n\t{e}")

    def update_tags(self, req: Request) -> None:
        tags = {"Last Modified By": req.user_id, "Last Modified": req.time}
        self.set_tags(tags)
        msg.info(f"Update Volume Tags: {self.name}")
        for volume in self.volumes:
            mnt = f", {volume.mount_point}" if volume.mount_point else ""
            msg.detail(f"Update volume: {volume.device}{mnt}")
            try:
                volume.set_tags(tags)
            except ProviderError as e:
                msg.warn(f"Failed to update tags for {volume.device}\n\t{e}")

    def create_security_tags(self) -> None:
        tags = dict(self.pod.cluster.compute.datacenter.security_tags)
        tags.update(self.pod.cluster.security_tags)
        self.set_tags(tags)

    # --- Destroy ---

    def pre_destroy(self, req: Request) -> Response:
        resp = self.setup_arc("fix arc permissions")
        if resp != Response.OK:
            return resp
        resp = self.stop_paging(req)
        if resp != Response.OK:
            return resp
        return self._destroy_dns_a_records(req)

    def destroy(self, req: Request) -> Response:
        resp = self._detach_volumes(req, destroy=not req.flag("preserve_volume"))
        if resp != Response.OK:
            return resp
        if self.eip is not None and self.eip.id:
            self.eip.detach()
            if not req.flag("preserve_eip"):
                self.eip.destroy()
        return self.provider.route(req)

    def _detach_volumes(self, req: Request, destroy: bool) -> Response:
        for volume in self.volumes:
            if not volume.preserve:
                volume.reset()
                continue
            if volume.detached():
                continue
            umount = remote(f"unmount {volume.mount_point}", f"{ARC_LIB}/destroy/umount", volume.mount_point)
            if not self.runner.run_remote(umount, self):
                return Response.FAIL
            volume.detach()
            if destroy:
                volume.destroy()
        return Response.OK

    # --- Provision ---

    def _provision(self, req: Request) -> Response:
        if req.command is not Command.PROVISION:
            req = req.clone(Command.PROVISION)
        if self.destroyed() or not any(req.flag(f) for f in SINGLE_RESOURCE_FLAGS):
            return self.lifecycle(req)
        msg.info(f"Instance Provision: {self.name}")
        return self.provision_single_resource(req)

    def provision_single_resource(self, req: Request) -> Response:
        if req.flag("aide"):
            resp = self.setup_arc("setting up arc")
            return resp if resp != Response.OK else self.provision_aide()
        if req.flag("role"):
            self.role.update()
            return Response.OK
        if req.flag("users"):
            resp = self.user_update(req)
            return resp if resp != Response.OK else self.provision_aide()
        msg.detail("Updating tags")
        self.update_tags(req)
        self.create_security_tags()
        return Response.OK

    def user_update(self, req: Request) -> Response:
        resp = self.setup_arc("setup arc on pre-refactor instances")
        if resp != Response.OK:
            return resp
        resp = self.configure_users()
        if resp != Response.OK:
            return resp
        msg.detail("Updating tags")
        self.update_tags(req)
        self.create_security_tags()
        return Response.OK

    def pre_provision(self, req: Request) -> Response:
        if req.flag("initial"):
            return Response.OK
        resp = self.user_update(req)
        if resp != Response.OK:
            return resp
        return self.stop_paging(req)

    def provision(self, req: Request) -> Response:
        self.role.update()
        compute = self.pod.cluster.compute
        hiera = [req.datacenter, self.servertype, compute.cfg.secrets_version]
        if req.flag("bootstrap"):
            hiera.append("bootstrap")
        if not self.runner.run_remote(remote("install hiera", f"{ARC_LIB}/provision/setup_hiera", *hiera), self):
            return Response.FAIL
        resp = self.install_servertype()
        if resp != Response.OK:
            return resp
        resp = self.install_packages()
        if resp != Response.OK:
            return resp
        if not req.flag("nopuppet"):
            puppet = remote("setup puppet", f"{ARC_LIB}/provision/setup_puppet", "fresh_install")
            if not self.runner.run_remote(puppet, self):
                return Response.FAIL
        if not req.flag("bootstrap"):
            secrets = [
                remote("install certs", f"{ARC_LIB}/provision/install_certs", compute.cfg.secrets_version),
                remote("install machine user", f"{ARC_LIB}/provision/install_machine_user", compute.cfg.secrets_version),
            ]
            if not self.runner.run(secrets, self):
                return Response.FAIL
        apply = remote("apply servertype", f"{ARC_LIB}/provision/apply_module", f"st_{self.servertype}")
        return _ok(self.runner.run_remote(apply, self))

    def post_provision(self, req: Request) -> Response:
        if req.flag("bootstrap"):
            return self.provision_aide()
        if req.flag("initial"):
            update = remote("update software", f"{ARC_LIB}/provision/update_software")
            if not self.runner.run_remote(update, self):
                return Response.FAIL
            resp = self.lifecycle(req.clone(Command.RESTART))
        else:
            resp = self.start_paging(req)
        if resp != Response.OK:
            return resp
        return self.provision_aide()

    def install_servertype(self) -> Response:
        pkg = self.pod.pkg_name
        staging = env.lookup("ARC")
        batch = [
            local("pull servertype from mirror", f"{ARC_LIB}/provision/pull_pkg", pkg, staging, self.servertype),
            copy("push servertype", f"{staging}/{pkg}", f"{ARC_LIB}/{pkg}"),
            remote("install servertype", f"{ARC_LIB}/tools/install_pkg", f"{ARC_LIB}/{pkg}"),
        ]
        return _ok(self.runner.run(batch, self))

    def install_packages(self) -> Response:
        """Instala los paquetes listados en $ARC/packages-<version>.txt, si existe."""
        staging = env.lookup("ARC")
        pull = local("pull packages from mirror", f"{ARC_LIB}/provision/pull_packages", self.servertype, self.version, staging)
        if not self.runner.run([pull], quiet=True):
            return Response.FAIL

        manifest = Path(staging) / f"packages-{self.version}.txt"
        logger.debug("Packages file: %s", manifest)
        if not manifest.exists():
            msg.detail("No packages found. Skipping...")
            return Response.OK

        remote_manifest = f"{ARC_LIB}/packages-{self.version}.txt"
        batch: List[Cmd] = [
            message("Installing packages", "Info"),
            copy("copy manifest file to the instance", str(manifest), remote_manifest),
        ]
        for line in manifest.read_text().splitlines():
            if not line.strip():
                continue
            pkg = Path(line.strip()).name
            batch += [
                copy(f"upload {pkg!r}", f"{staging}/{pkg}", f"{ARC_LIB}/{pkg}"),
                local(f"cleanup {pkg!r}", "rm", "-f", f"{staging}/{pkg}"),
                message(f"Installing: {pkg}"),
            ]
        batch += [
            remote("install all the packages", f"{ARC_LIB}/tools/install_packages", remote_manifest),
            message("Packages Installed", "Detail"),
            local("cleanup packages from mirror", "rm", "-f", str(manifest)),
        ]
        return _ok(self.runner.run_quiet(batch, self))

    def provision_aide(self) -> Response:
        aide = self.pod.cluster.compute.cfg.aide_version
        pkg = ""
        if self.image.startswith("centos"):
            pkg = f"puppet-aide-1.0.0.0-{aide}.noarch.rpm"
        elif self.image.startswith("ubuntu"):
            pkg = f"puppet-aide_1.0.0.0-{aide}_all.deb"
        logger.debug("Aide Package Name: %r", pkg)
        staging = env.lookup("ARC")
        batch = [
            local("pull aide puppet module from mirror", f"{ARC_LIB}/provision/pull_pkg", pkg, staging),
            copy("push aide puppet module", f"{staging}/{pkg}", f"{ARC_LIB}/{pkg}"),
            remote("install aide puppet module", f"{ARC_LIB}/tools/install_pkg", f"{ARC_LIB}/{pkg}"),
            remote("apply aide", f"{ARC_LIB}/provision/apply_module", "aide"),
        ]
        return _ok(self.runner.run(batch, self))

    # --- Start / Stop / Restart / Replace ---

    def start(self, req: Request) -> Response:
        return self.provider.route(req)

    def post_start(self, req: Request) -> Response:
        resp = self.setup_arc("fix arc permissions")
        if resp != Response.OK:
            return resp
        resp = self.start_paging(req)
        if resp != Response.OK:
            return resp
        return self.load(req.clone(Command.LOAD))

    def pre_stop(self, req: Request) -> Response:
        resp = self.setup_arc("fix arc permissions")
        if resp != Response.OK:
            return resp
        return self.stop_paging(req)

    def stop(self, req: Request) -> Response:
        if req.flag("hard"):
            return self.provider.route(req)
        self.runner.run_quiet([sudo("stop instance", "/sbin/shutdown -h now")], self)
        return _ok(self.reload(req.clone(Command.LOAD), self.stopped, "stop"))

    def restart(self, req: Request) -> Response:
        if req.flag("hard"):
            return self.provider.route(req)
        resp = self.lifecycle(req.clone(Command.STOP))
        if resp != Response.OK:
            return resp
        return self.lifecycle(req.clone(Command.START))

    def replace(self, req: Request) -> Response:
        preserve = ["preserve_volume"]
        if self.eip is not None and self.eip.id:
            preserve.append("preserve_eip")

        destroy = req.clone(Command.DESTROY)
        create = req.clone(Command.CREATE)
        for flag in preserve:
            destroy.flags.append(flag)
            create.flags.append(flag)
        resp = self.lifecycle(destroy)
        if resp != Response.OK:
            return resp
        resp = self.lifecycle(create)
        if resp != Response.OK or req.flag("noprovision"):
            return resp

        provision = req.clone(Command.PROVISION)
        provision.flags.append("initial")
        return self.lifecycle(provision)

    # --- Paging ---

    def start_paging(self, req: Request) -> Response:
        if req.flag("bootstrap") or req.flag("force"):
            return Response.OK
        self._paging("enable", "consul")
        try:
            self.runner.execute([copy("Copy check_monit_services", f"{ARC_LIB}/tools/check_monit_services")], self)
        except RemoteExecError as e:
            msg.detail("Unable to enable sensu paging")
            msg.warn(f"{e}. See log for more details.")
        self._paging("enable", "sensu")
        return Response.OK

    def stop_paging(self, req: Request) -> Response:
        if req.flag("bootstrap") or req.flag("force"):
            return Response.OK
        self._paging("disable", "consul")
        self._paging("disable", "sensu")
        return Response.OK

    def _paging(self, action: str, service: str) -> None:
        """Los fallos de paging se avisan pero no detienen la operación."""
        cmd = remote(f"{action} {service} paging", f"{ARC_LIB}/paging/{service}_paging", action, self.name)
        try:
            self.runner.run_remote_with_output(cmd, self)
        except RemoteExecError as e:
            msg.detail(f"Unable to {action} {service} paging")
            msg.warn(f"{e}. See log for more details.")
            logger.warning("%s", e.output)

    # --- Audit / info ---

    def audit(self, name: str) -> None:
        if self.pod.cluster.audit_ignore:
            return
        self.provider.audit(name)
        if self.created():
            self.volumes.audit(name)

    def config(self) -> None:
        msg.detail(f"{'name':<20}\t{self.name}")
        self.pod.cfg.print()

    def info(self) -> None:
        if self.destroyed():
            return
        msg.info("Instance")
        msg.detail(f"{'name':<20}\t{self.name}")
        msg.detail(f"{'id':<20}\t{self.id}")
        msg.detail(f"{'image id':<20}\t{self.image_id}")
        msg.detail(f"{'state':<20}\t{self.state}")
        msg.detail(f"{'private ip address':<20}\t{self.private_ip_address}")
        if self.private_a_record is not None:
            msg.detail(f"{'private dns a record':<20}\t{self.private_a_record.id}")
        if self.public_ip_address:
            msg.detail(f"{'public ip address':<20}\t{self.public_ip_address}")
        if self.public_a_record is not None:
            msg.detail(f"{'public dns a record':<20}\t{self.public_a_record.id}")
        if self.role.name:
            msg.detail(f"{'role':<20}\t{self.role.name}")
        self.provider.info()
        self.volumes.info()

    def help(self) -> None:
        instance_help(self.name)


def instance_help(name: str = "") -> None:
    n = f" {name}" if name else ""
    rows = commands(
        (Command.CREATE, f"create{n} instance"),
        (Command.PROVISION, f"provision{n} instance"),
        (f"{Command.PROVISION} users", f"update{n} instance users"),
        (Command.START, f"start{n} instance"),
        (Command.STOP, f"stop{n} instance"),
        (Command.RESTART, f"restart{n} instance"),
        (Command.REPLACE, f"replace{n} instance"),
        (Command.AUDIT, f"audit{n} instance"),
        (Command.DESTROY, f"destroy{n} instance"),
    )
    show_help(f"instance{n or ' [name]'}", rows + trailer(f"{n.strip()} instance".strip()))
