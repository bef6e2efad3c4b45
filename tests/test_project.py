"""
Tests for the SourceProject cache and cross-file class resolution.
"""

import os
from pathlib import Path

from ng_explorer.analyzer.project import SourceProject, normalize_path, strip_type_arguments


def test_strip_type_arguments():
    assert strip_type_arguments("Store<State>") == "Store"
    assert strip_type_arguments("Api.Client") == "Api.Client"
    assert strip_type_arguments(" Map<string, Item> ") == "Map"


class TestLoading:
    def test_load_caches_units(self, write_files):
        root = write_files({"a.ts": "export class A {}\n"})
        project = SourceProject()
        first = project.load(root / "a.ts")
        assert first is not None
        assert project.load(str(root / "a.ts")) is first
        assert root / "a.ts" in project
        assert len(project) == 1

    def test_paths_are_normalized(self, write_files):
        root = write_files({"src/a.ts": "export class A {}\n"})
        project = SourceProject()
        unit = project.load(root / "src" / ".." / "src" / "a.ts")
        assert unit.file_path == os.path.abspath(str(root / "src" / "a.ts"))
        assert project.get(root / "src" / "a.ts") is unit

    def test_missing_file_returns_none(self, temp_dir: Path):
        project = SourceProject()
        assert project.load(temp_dir / "missing.ts") is None
        assert len(project) == 0

    def test_refresh_reparses_changed_file(self, write_files):
        root = write_files({"a.ts": "export class A {}\n"})
        project = SourceProject()
        original = project.load(root / "a.ts")

        assert project.load(root / "a.ts", refresh=True) is original

        (root / "a.ts").write_text("export class B {}\n", encoding="utf-8")
        assert project.load(root / "a.ts") is original
        refreshed = project.load(root / "a.ts", refresh=True)
        assert refreshed is not original
        assert refreshed.get_class("B") is not None

    def test_refresh_evicts_deleted_file(self, write_files):
        root = write_files({"a.ts": "export class A {}\n"})
        project = SourceProject()
        project.load(root / "a.ts")
        (root / "a.ts").unlink()
        assert project.load(root / "a.ts", refresh=True) is None
        assert root / "a.ts" not in project

    def test_add_directory(self, write_files):
        root = write_files(
            {
                "b.ts": "export class B {}\n",
                "a.ts": "export class A {}\n",
                "a.spec.ts": "class ASpec {}\n",
                "notes.md": "# notes\n",
                "nested/c.ts": "export class C {}\n",
                "node_modules/lib/d.ts": "export class D {}\n",
            }
        )
        project = SourceProject()

        flat = project.add_directory(root)
        assert [Path(u.file_path).name for u in flat] == ["a.spec.ts", "a.ts", "b.ts"]

        recursive = project.add_directory(root, recursive=True, include_specs=False)
        names = [Path(u.file_path).name for u in recursive]
        assert names == ["a.ts", "b.ts", "c.ts"]

    def test_add_missing_directory(self, temp_dir: Path):
        assert SourceProject().add_directory(temp_dir / "nope") == []

    def test_read_text(self, write_files):
        root = write_files({"t.html": "<app-x></app-x>\n"})
        project = SourceProject()
        assert project.read_text(root / "t.html") == "<app-x></app-x>\n"
        assert project.read_text(root / "missing.html") is None


class TestResolveModule:
    def test_candidates(self, write_files):
        root = write_files(
            {
                "app/main.ts": "",
                "app/util.ts": "",
                "app/view.tsx": "",
                "app/types.d.ts": "",
                "app/services/index.ts": "",
            }
        )
        project = SourceProject()
        main = str(root / "app" / "main.ts")
        app = normalize_path(root / "app")

        assert project.resolve_module(main, "./util") == os.path.join(app, "util.ts")
        assert project.resolve_module(main, "./view") == os.path.join(app, "view.tsx")
        assert project.resolve_module(main, "./types") == os.path.join(app, "types.d.ts")
        assert project.resolve_module(main, "./services") == os.path.join(app, "services", "index.ts")
        assert project.resolve_module(main, "./util.ts") == os.path.join(app, "util.ts")
        assert project.resolve_module(main, "./missing") is None

    def test_bare_specifiers_are_not_resolved(self, write_files):
        root = write_files({"main.ts": ""})
        assert SourceProject().resolve_module(str(root / "main.ts"), "@angular/core") is None


class TestResolveClass:
    def test_local_named_default_and_alias(self, write_files):
        root = write_files(
            {
                "main.ts": """
                    import Config from './config';
                    import { UserService as Users } from './user.service';

                    class Local {}
                """,
                "config.ts": "export default class ConfigService {}\n",
                "user.service.ts": "export class UserService {}\n",
            }
        )
        project = SourceProject()
        unit = project.load(root / "main.ts")

        assert project.resolve_class(unit, "Local").name == "Local"
        assert project.resolve_class(unit, "Config").name == "ConfigService"
        users = project.resolve_class(unit, "Users<Filter>")
        assert users.name == "UserService"
        assert users.file == normalize_path(root / "user.service.ts")
        assert project.resolve_class(unit, "Unknown") is None

    def test_barrel_re_exports(self, write_files):
        root = write_files(
            {
                "main.ts": """
                    import { UserService, Auth, Tokens, Hidden } from './services';
                """,
                "services/index.ts": """
                    export * from './user.service';
                    export { AuthService as Auth } from './auth.service';
                    export { TokenStore as Tokens } from './local';
                """,
                "services/user.service.ts": "export class UserService {}\n",
                "services/auth.service.ts": "export class AuthService {}\n",
                "services/local.ts": """
                    class Store {}
                    class Hidden {}
                    export { Store as TokenStore };
                """,
            }
        )
        project = SourceProject()
        unit = project.load(root / "main.ts")

        assert project.resolve_class(unit, "UserService").name == "UserService"
        assert project.resolve_class(unit, "Auth").name == "AuthService"
        assert project.resolve_class(unit, "Tokens").name == "Store"
        # Not exported by the module it is imported from
        assert project.resolve_class(unit, "Hidden") is None

    def test_namespace_imports(self, write_files):
        root = write_files(
            {
                "main.ts": """
                    import * as Api from './api';
                    import * as Pkg from '@lib/pkg';
                """,
                "api.ts": """
                    export * as models from './models';
                    export class Client {}
                """,
                "models.ts": "export class User {}\n",
            }
        )
        project = SourceProject()
        unit = project.load(root / "main.ts")

        assert project.resolve_class(unit, "Api.Client").name == "Client"
        assert project.resolve_class(unit, "Api.models.User").name == "User"
        assert project.resolve_class(unit, "Api.Missing") is None
        assert project.resolve_class(unit, "Pkg.Thing") is None
        assert project.resolve_class(unit, "Api") is None

    def test_re_export_cycles_terminate(self, write_files):
        root = write_files(
            {
                "main.ts": "import { Ghost } from './a';\n",
                "a.ts": "export * from './b';\n",
                "b.ts": "export * from './a';\n",
            }
        )
        project = SourceProject()
        unit = project.load(root / "main.ts")
        assert project.resolve_class(unit, "Ghost") is None
