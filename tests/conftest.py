"""
Pytest configuration and shared fixtures for ng-explorer tests.
"""

import tempfile
import textwrap
from pathlib import Path
from typing import Callable, Dict, Generator

import pytest

from ng_explorer.analyzer.base_analyzer import SourceAnalyzer
from ng_explorer.analyzer.models import SourceUnit
from ng_explorer.analyzer.project import SourceProject


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory that is cleaned up after test.

    Yields:
        Path to temporary directory
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def write_files(temp_dir: Path) -> Callable[[Dict[str, str]], Path]:
    """Write a set of files under the temporary directory.

    Contents are dedented, so fixtures can use indented triple-quoted
    strings.

    Returns:
        Function taking {relative path: content} and returning the root
    """

    def _write(files: Dict[str, str]) -> Path:
        for relative, content in files.items():
            path = temp_dir / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(textwrap.dedent(content).lstrip("\n"), encoding="utf-8")
        return temp_dir

    return _write


@pytest.fixture
def analyze_source() -> Callable[..., SourceUnit]:
    """Parse inline TypeScript into a SourceUnit without touching the disk."""
    analyzer = SourceAnalyzer()

    def _analyze(content: str, file_path: str = "/virtual/sample.component.ts") -> SourceUnit:
        return analyzer.analyze_source(textwrap.dedent(content).lstrip("\n"), file_path)

    return _analyze


@pytest.fixture
def project() -> SourceProject:
    return SourceProject()


@pytest.fixture
def svc_component_file(write_files) -> Path:
    """Component calling load() and save() on an injected service.

    Returns:
        Path to the component file
    """
    root = write_files(
        {
            "a.component.ts": """
                import { Component } from '@angular/core';
                import { Svc } from '@app/svc';

                @Component({
                  selector: 'app-a',
                  template: '<div></div>',
                })
                export class A {
                  constructor(private svc: Svc) {}

                  ngOnInit(): void {
                    this.svc.load();
                  }

                  persist(): void {
                    this.svc?.save();
                  }
                }
            """,
        }
    )
    return root / "a.component.ts"


@pytest.fixture
def user_list_component_file(write_files) -> Path:
    """Component mixing parameter properties, constructor-only params,
    namespace-typed fields and non-target dependencies.

    Returns:
        Path to the component file
    """
    root = write_files(
        {
            "user-list.component.ts": """
                import { Component } from '@angular/core';
                import { UserApi, AuditApi as Audit } from '@app/api';
                import * as Store from '@app/store';
                import { Logger } from './logger';

                @Component({
                  selector: 'app-user-list',
                  templateUrl: './user-list.component.html',
                })
                export class UserListComponent {
                  private cache: Store.Cache;

                  constructor(
                    private readonly users: UserApi,
                    audit: Audit,
                    private logger: Logger,
                  ) {
                    audit.record('init');
                    this.users.prefetch();
                  }

                  load(): void {
                    this.users.list().subscribe();
                    this.users?.count();
                    this.cache.clear();
                    this.logger.info('loaded');
                  }

                  get total(): number {
                    return this.users.total();
                  }
                }
            """,
            "user-list.component.html": """
                <ul>
                  <li *ngFor="let user of users">{{ user.name }}</li>
                </ul>
            """,
            "logger.ts": """
                export class Logger {
                  info(message: string): void {}
                }
            """,
        }
    )
    return root / "user-list.component.ts"


@pytest.fixture
def recursive_project(write_files) -> Path:
    """A small app: a shell component rendering two child components and
    injecting a service chain.

    Layout:
        app/shell.component.ts       <app-user-card>, <app-footer>, SessionService, ApiClient
        app/shell.component.html
        app/footer.component.ts      sibling of the root, found by directory preload
        app/session.service.ts       @Injectable, injects UserService
        app/user-card/...component   found through the root's relative imports
        app/users/user.service.ts    plain class, service by filename

    Returns:
        Path to the ``app`` directory
    """
    root = write_files(
        {
            "app/shell.component.ts": """
                import { Component } from '@angular/core';
                import { ApiClient } from '@app/api';
                import { SessionService } from './session.service';
                import { UserCardComponent } from './user-card/user-card.component';

                @Component({
                  selector: 'app-shell',
                  templateUrl: './shell.component.html',
                  imports: [UserCardComponent],
                })
                export class ShellComponent {
                  constructor(
                    private session: SessionService,
                    private api: ApiClient,
                  ) {}

                  ngOnInit(): void {
                    this.session.start();
                    this.api.ping();
                  }
                }
            """,
            "app/shell.component.html": """
                <div class="shell">
                  <app-user-card></app-user-card>
                  <router-outlet></router-outlet>
                  <app-footer></app-footer>
                </div>
            """,
            "app/footer.component.ts": """
                import { Component } from '@angular/core';

                @Component({
                  selector: 'app-footer',
                  template: '<p>footer</p>',
                })
                export class FooterComponent {}
            """,
            "app/session.service.ts": """
                import { Injectable } from '@angular/core';
                import { UserService } from './users/user.service';

                @Injectable({ providedIn: 'root' })
                export class SessionService {
                  constructor(private users: UserService) {}

                  start(): void {}
                }
            """,
            "app/user-card/user-card.component.ts": """
                import { Component } from '@angular/core';
                import { ApiClient } from '@app/api';
                import { UserService } from '../users/user.service';

                @Component({
                  selector: 'app-user-card',
                  template: `<span>{{ name }}</span>`,
                })
                export class UserCardComponent {
                  name = '';

                  constructor(
                    private users: UserService,
                    private api: ApiClient,
                  ) {}

                  refresh(): void {
                    this.api.getUser(1);
                  }
                }
            """,
            "app/users/user.service.ts": """
                export class UserService {
                  current(): string {
                    return '';
                  }
                }
            """,
        }
    )
    return root / "app"


@pytest.fixture
def mutual_components(write_files) -> Path:
    """Two components rendering each other.

    Returns:
        Directory containing a.component.ts and b.component.ts
    """
    root = write_files(
        {
            "cycle/a.component.ts": """
                import { Component } from '@angular/core';

                @Component({
                  selector: 'a-comp',
                  template: '<b-comp></b-comp>',
                })
                export class AComponent {}
            """,
            "cycle/b.component.ts": """
                import { Component } from '@angular/core';

                @Component({
                  selector: 'b-comp',
                  template: '<section><a-comp></a-comp></section>',
                })
                export class BComponent {}
            """,
        }
    )
    return root / "cycle"


@pytest.fixture
def indexed_project(write_files) -> Path:
    """Project tree for class index and service catalog tests.

    Returns:
        Project root directory
    """
    return write_files(
        {
            "src/api/user.api.ts": """
                import { Injectable } from '@angular/core';

                @Injectable({ providedIn: 'root' })
                export class UserApi {
                  list() {}
                  get(id: number) {}
                }
            """,
            "src/api/constants.ts": """
                export const API_ROOT = '/api';
            """,
            "src/app/user-list.component.ts": """
                import { Component } from '@angular/core';
                import { Logger } from 'some-logger';
                import { UserApi } from '../api/user.api';

                @Component({
                  selector: 'app-user-list',
                  templateUrl: './user-list.component.html',
                })
                export class UserListComponent {
                  constructor(private api: UserApi, private logger: Logger) {}

                  ngOnInit(): void {
                    this.api.list();
                    this.api.get(1);
                    this.logger.log('init');
                  }
                }
            """,
            "src/app/user-list.component.spec.ts": """
                export class UserListSpecHelper {}
            """,
            "src/shared/base.ts": """
                export abstract class BaseComponent {}
            """,
            "node_modules/some-logger/index.ts": """
                export class Logger {}
            """,
        }
    )
