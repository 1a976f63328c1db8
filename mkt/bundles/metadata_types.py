"""Source folder name -> Salesforce metadata type.

Only folders listed here contribute types to a generated package.xml.
"""

from __future__ import annotations

METADATA_TYPE_FOLDERS: dict[str, str] = {
    "applications": "CustomApplication",
    "approvalProcesses": "ApprovalProcess",
    "assignmentRules": "AssignmentRules",
    "aura": "AuraDefinitionBundle",
    "authproviders": "AuthProvider",
    "autoResponseRules": "AutoResponseRules",
    "certs": "Certificate",
    "classes": "ApexClass",
    "cleanDataServices": "CleanDataService",
    "communities": "Community",
    "components": "ApexComponent",
    "connectedApps": "ConnectedApp",
    "contentassets": "ContentAsset",
    "corsWhitelistOrigins": "CorsWhitelistOrigin",
    "customApplicationComponents": "CustomApplicationComponent",
    "customMetadata": "CustomMetadata",
    "customPermissions": "CustomPermission",
    "dashboards": "Dashboard",
    "datacategorygroups": "DataCategoryGroup",
    "documents": "Document",
    "duplicateRules": "DuplicateRule",
    "email": "EmailTemplate",
    "flexipages": "FlexiPage",
    "flowDefinitions": "FlowDefinition",
    "flows": "Flow",
    "globalValueSets": "GlobalValueSet",
    "globalValueSetTranslations": "GlobalValueSetTranslation",
    "homePageComponents": "HomePageComponent",
    "homePageLayouts": "HomePageLayout",
    "installedPackages": "InstalledPackage",
    "labels": "CustomLabels",
    "layouts": "Layout",
    "lightningBolts": "LightningBolt",
    "lightningExperienceThemes": "LightningExperienceTheme",
    "lwc": "LightningComponentBundle",
    "matchingRules": "MatchingRule",
    "messageChannels": "LightningMessageChannel",
    "milestoneTypes": "MilestoneType",
    "namedCredentials": "NamedCredential",
    "networks": "Network",
    "objectTranslations": "CustomObjectTranslation",
    "objects": "CustomObject",
    "pages": "ApexPage",
    "pathAssistants": "PathAssistant",
    "permissionsetgroups": "PermissionSetGroup",
    "permissionsets": "PermissionSet",
    "platformEventChannelMembers": "PlatformEventChannelMember",
    "platformEventChannels": "PlatformEventChannel",
    "profiles": "Profile",
    "queues": "Queue",
    "quickActions": "QuickAction",
    "recommendationStrategies": "RecommendationStrategy",
    "remoteSiteSettings": "RemoteSiteSetting",
    "reportTypes": "ReportType",
    "reports": "Report",
    "roles": "Role",
    "samlssoconfigs": "SamlSsoConfig",
    "sharingRules": "SharingRules",
    "sharingSets": "SharingSet",
    "sites": "CustomSite",
    "standardValueSets": "StandardValueSet",
    "staticresources": "StaticResource",
    "tabs": "CustomTab",
    "territories": "Territory",
    "territory2Models": "Territory2Model",
    "territory2Types": "Territory2Type",
    "topicsForObjects": "TopicsForObjects",
    "translations": "Translations",
    "triggers": "ApexTrigger",
    "workflows": "Workflow",
}


def metadata_type_for(folder_name: str) -> str | None:
    return METADATA_TYPE_FOLDERS.get(folder_name)


def member_name(entry_name: str) -> str:
    """Component name for a folder entry.

    `Foo.cls` and `Foo.cls-meta.xml` both name `Foo`; bundle folders such as
    `lwc/myCard` are already bare names.
    """
    return entry_name.split(".", 1)[0]
